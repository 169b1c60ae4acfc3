"""Service layer for billable services offered on a project."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from models.service import Service, ServiceCreate, ServiceUpdate
from repos import base
from services.common import apply_updates, target_organization, visible_project


async def list_services(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
) -> list[Service]:
    await visible_project(session, caller, project_id)
    return await base.list_scoped(
        session,
        Service,
        organization_id=caller.organization_id,
        order_by=Service.created_at,
        project_id=project_id,
    )


async def get_service(
    session: AsyncSession,
    *,
    caller: CallerContext,
    service_id: UUID,
) -> Service:
    service = await base.get_scoped(
        session, Service, organization_id=caller.organization_id, record_id=service_id
    )
    if not service:
        raise not_found("services")
    authorize("services", Operation.SELECT, caller, service)
    return service


async def create_service(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
    payload: ServiceCreate,
) -> Service:
    """
    Add a service to a project.

    The project must be visible to the caller, so a service can never point
    at another organization's project.
    """
    project = await visible_project(session, caller, project_id)

    service = Service(
        organization_id=target_organization(caller, payload.organization_id),
        project_id=project.id,
        name=payload.name,
        description=payload.description,
        unit_price=payload.unit_price,
        unit=payload.unit,
        payment_status=payload.payment_status.value if payload.payment_status else None,
    )
    authorize("services", Operation.INSERT, caller, service)

    service = await base.create(session, service)
    await session.commit()
    await session.refresh(service)
    return service


async def update_service(
    session: AsyncSession,
    *,
    caller: CallerContext,
    service_id: UUID,
    payload: ServiceUpdate,
) -> Service:
    service = await get_service(session, caller=caller, service_id=service_id)
    authorize("services", Operation.UPDATE, caller, service)

    apply_updates(service, payload)
    await session.commit()
    await session.refresh(service)
    return service


async def delete_service(
    session: AsyncSession,
    *,
    caller: CallerContext,
    service_id: UUID,
) -> None:
    service = await get_service(session, caller=caller, service_id=service_id)
    authorize("services", Operation.DELETE, caller, service)

    await base.delete(session, service)
    await session.commit()
