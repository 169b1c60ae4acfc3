"""Service layer for project proposals."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.policies import Operation, authorize, not_found
from api.tenancy import CallerContext
from models.project_proposal import ProjectProposal, ProjectProposalCreate, ProjectProposalUpdate
from repos import base
from services.common import apply_updates, target_organization, visible_project


async def list_proposals(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
) -> list[ProjectProposal]:
    await visible_project(session, caller, project_id)
    return await base.list_scoped(
        session,
        ProjectProposal,
        organization_id=caller.organization_id,
        order_by=ProjectProposal.created_at.desc(),
        project_id=project_id,
    )


async def get_proposal(
    session: AsyncSession,
    *,
    caller: CallerContext,
    proposal_id: UUID,
) -> ProjectProposal:
    proposal = await base.get_scoped(
        session, ProjectProposal, organization_id=caller.organization_id, record_id=proposal_id
    )
    if not proposal:
        raise not_found("project_proposals")
    authorize("project_proposals", Operation.SELECT, caller, proposal)
    return proposal


async def create_proposal(
    session: AsyncSession,
    *,
    caller: CallerContext,
    project_id: UUID,
    payload: ProjectProposalCreate,
) -> ProjectProposal:
    project = await visible_project(session, caller, project_id)

    proposal = ProjectProposal(
        **payload.model_dump(exclude={"organization_id"}),
        project_id=project.id,
        organization_id=target_organization(caller, payload.organization_id),
    )
    authorize("project_proposals", Operation.INSERT, caller, proposal)

    proposal = await base.create(session, proposal)
    await session.commit()
    await session.refresh(proposal)
    return proposal


async def update_proposal(
    session: AsyncSession,
    *,
    caller: CallerContext,
    proposal_id: UUID,
    payload: ProjectProposalUpdate,
) -> ProjectProposal:
    proposal = await get_proposal(session, caller=caller, proposal_id=proposal_id)
    authorize("project_proposals", Operation.UPDATE, caller, proposal)

    apply_updates(proposal, payload)
    await session.commit()
    await session.refresh(proposal)
    return proposal


async def delete_proposal(
    session: AsyncSession,
    *,
    caller: CallerContext,
    proposal_id: UUID,
) -> None:
    proposal = await get_proposal(session, caller=caller, proposal_id=proposal_id)
    authorize("project_proposals", Operation.DELETE, caller, proposal)

    await base.delete(session, proposal)
    await session.commit()
