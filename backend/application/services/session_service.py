"""
Session service orchestrator.

Owns the session lifecycle (in_progress -> completed): starting a session
with a balanced image assignment, resuming it, merging draft progress and
finalizing it exactly once.

Dependencies: backend.boundary.db.CRUD, backend.core, backend.configs
System role: Session use case orchestration
"""

import logging
import random
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.allocation_service import ImagePoolAllocator
from backend.application.services.scenario_service import ScenarioService, scenario_to_dict
from backend.boundary.db.base import utcnow
from backend.boundary.db.CRUD.image_crud import image_crud
from backend.boundary.db.CRUD.session_crud import session_crud
from backend.boundary.db.CRUD.session_image_crud import session_image_crud
from backend.boundary.db.models.session_model import SessionModel, SessionStatus
from backend.configs.study import IMAGE_CATEGORIES, StudySettings
from backend.core.drafts import find_discouraged_keys, merge_draft, normalize_draft_image_urls
from backend.core.exceptions import (
    InvalidStudyConfigurationError,
    SessionAlreadyCompletedError,
    SessionNotFoundError,
    SubmissionMismatchError,
)
from backend.core.image_membership import check_image_membership
from backend.core.order_balancer import assign_order, select_strategy
from backend.observability.log_utils import describe_document, log_with_context

logger = logging.getLogger(__name__)


class SessionService:
    """Session service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        settings: StudySettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize session service with async database session.

        Args:
            db: Async SQLAlchemy session; the service commits and rolls back
            settings: Study settings (dataset version, image URL prefix)
            rng: Random source for scenario tie-breaking and order balancing
        """
        self.db = db
        self.settings = settings or StudySettings()
        self.rng = rng or random.Random()
        self.scenarios = ScenarioService(db, rng=self.rng)
        self.allocator = ImagePoolAllocator(db)

    def _image_url(self, category: str, image_id: str) -> str:
        return f"{self.settings.image_url_prefix}{category}/{image_id}"

    def _serialize_assignment(self, session: SessionModel, resumed: bool = False) -> dict:
        return {
            "session_id": session.id,
            "status": session.status.value,
            "context": session.scenario_id,
            "scenario": scenario_to_dict(session.scenario) if session.scenario else None,
            "stage": session.stage,
            "n_images": session.n_images,
            "statement_order": session.statement_order,
            "dataset_version": session.dataset_version,
            "started_at": session.started_at,
            "resumed": resumed,
            "images": [
                {
                    "image_id": link.image_id,
                    "category": link.image.category,
                    "order_index": link.order_index,
                    "statement": link.statement,
                    "image_url": self._image_url(link.image.category, link.image_id),
                }
                for link in session.images
            ],
        }

    async def start(
        self,
        scenario_id: str | None,
        target_count: int,
        categories: Sequence[str] = IMAGE_CATEGORIES,
    ) -> dict:
        """
        Start a session with a balanced scenario and image assignment.

        Scenario resolution, per-category reservation, counter updates and
        the session/assignment inserts commit together or not at all.

        Args:
            scenario_id: Explicit scenario id, or None for balanced selection
            target_count: Total number of images for the session
            categories: Categories to draw an equal share from

        Returns:
            dict: Full assignment (session fields plus ordered images)

        Raises:
            InvalidStudyConfigurationError: target_count does not split evenly
            ScenarioNotFoundError / ScenarioDisabledError: bad explicit scenario
            NoScenarioAvailableError: No enabled scenario exists
            InsufficientImagesError: A category could not meet its quota
        """
        if not categories or target_count <= 0 or target_count % len(categories):
            raise InvalidStudyConfigurationError(target_count, len(categories))
        per_category = target_count // len(categories)

        try:
            scenario = await self.scenarios.resolve_for_session(scenario_id)
            selection = await self.allocator.reserve(categories, per_category)

            strategy = select_strategy(selection, target_count)
            history = {}
            if strategy.uses_history:
                image_ids = [i.image_id for images in selection.values() for i in images]
                history = await session_image_crud.get_statement_history(self.db, image_ids)
            assignment = assign_order(
                selection, target_count, history=history, rng=self.rng, strategy=strategy
            )

            now = utcnow()
            await self.allocator.commit_counters(selection, now)
            session = await session_crud.create(
                self.db,
                status=SessionStatus.IN_PROGRESS,
                scenario_id=scenario.id,
                n_images=target_count,
                statement_order=assignment.statement_order,
                dataset_version=self.settings.dataset_version,
                started_at=now,
                updated_at=now,
            )
            await session_image_crud.add_assignments(self.db, session.id, assignment.images, now)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Session started",
            extra={
                "session_id": str(session.id),
                "scenario_id": scenario.id,
                "n_images": target_count,
                "statement_order": assignment.statement_order,
                "order_strategy": assignment.strategy,
            },
        )
        started = await session_crud.get_with_images(self.db, session.id)
        return self._serialize_assignment(started)

    async def resume(self, session_id: UUID) -> dict | None:
        """
        Return the existing assignment of an in-progress session.

        Args:
            session_id: Session UUID presented by a returning client

        Returns:
            dict | None: Assignment unchanged, or None when the session is
            absent or completed (the caller must start a new one)
        """
        session = await session_crud.get_with_images(self.db, session_id)
        if session is None or session.status != SessionStatus.IN_PROGRESS:
            return None
        logger.info("Session resumed", extra={"session_id": str(session_id)})
        return self._serialize_assignment(session, resumed=True)

    async def get_session(self, session_id: UUID, include_draft: bool = False) -> dict:
        """
        Get session state by ID.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        session = await session_crud.get_with_images(self.db, session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        data = {
            "session_id": session.id,
            "status": session.status.value,
            "context": session.scenario_id,
            "scenario": scenario_to_dict(session.scenario) if session.scenario else None,
            "stage": session.stage,
            "n_images": session.n_images,
            "statement_order": session.statement_order,
            "started_at": session.started_at,
            "updated_at": session.updated_at,
            "completed_at": session.completed_at,
        }
        if include_draft:
            data["payload_draft"] = normalize_draft_image_urls(
                session.payload_draft, self.settings.image_url_prefix
            )
        return data

    async def verify_image_set(
        self,
        session_id: UUID,
        submitted_image_ids: Sequence[str],
        exact: bool = False,
    ) -> None:
        """
        Check submitted image ids against the session's assignment.

        Runs inside the caller's transaction; an unknown session has no
        assigned images, so every submitted id is reported as unassigned.

        Raises:
            ImageSetMismatchError: duplicate, unassigned or (exact) missing ids
        """
        assigned = await session_image_crud.get_assigned_image_ids(self.db, session_id)
        check_image_membership(assigned, submitted_image_ids, exact=exact, session_id=session_id)

    async def merge_progress(
        self,
        session_id: UUID,
        stage: str | None = None,
        draft_patch: dict[str, Any] | None = None,
        submitted_image_ids: Sequence[str] | None = None,
        envelope: dict[str, Any] | None = None,
    ) -> dict:
        """
        Shallow-merge a draft patch into an in-progress session.

        Top-level keys of the patch replace stored keys; absent keys are kept,
        so replaying the same patch leaves the draft unchanged.

        Args:
            session_id: Session UUID
            stage: New UI stage, if provided
            draft_patch: Partial draft document
            submitted_image_ids: Image ids referenced by the patch, checked
                against the assignment when given
            envelope: Raw top-level request fields, inspected for identity
                keys the client should not resend

        Returns:
            dict: session_id, status, updated_at

        Raises:
            SessionNotFoundError: If the session does not exist
            SessionAlreadyCompletedError: If the session is completed
            ImageSetMismatchError: If referenced images are not assigned
        """
        discouraged = find_discouraged_keys(envelope, draft_patch)
        if discouraged:
            logger.warning(
                "Progress patch carries identity keys",
                extra={"session_id": str(session_id), "keys": ",".join(discouraged)},
            )

        try:
            session = await session_crud.get_by_id(self.db, session_id, for_update=True)
            if session is None:
                raise SessionNotFoundError(session_id)
            if session.status == SessionStatus.COMPLETED:
                raise SessionAlreadyCompletedError(session_id)
            if submitted_image_ids is not None:
                await self.verify_image_set(session_id, submitted_image_ids)

            patch = normalize_draft_image_urls(draft_patch or {}, self.settings.image_url_prefix)
            session.payload_draft = merge_draft(session.payload_draft, patch)
            if stage is not None:
                session.stage = stage
            session.updated_at = utcnow()
            await self.db.flush()
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        log_with_context(
            logger,
            logging.INFO,
            "Progress merged",
            session_id=session_id,
            stage=session.stage,
            patch_keys=describe_document(patch),
            submitted_images=submitted_image_ids,
        )
        return {
            "session_id": session.id,
            "status": session.status.value,
            "updated_at": session.updated_at,
        }

    @staticmethod
    def _check_fixed_values(
        session: SessionModel,
        context: str | None,
        statement_order: int | None,
    ) -> None:
        if context is not None and context != session.scenario_id:
            raise SubmissionMismatchError("context_mismatch", session.scenario_id, context)
        if statement_order is not None and statement_order != session.statement_order:
            raise SubmissionMismatchError(
                "statement_order_mismatch", session.statement_order, statement_order
            )

    @staticmethod
    def _completion_result(session: SessionModel, already_completed: bool) -> dict:
        return {
            "session_id": session.id,
            "status": SessionStatus.COMPLETED.value,
            "completed_at": session.completed_at,
            "already_completed": already_completed,
        }

    async def finalize(
        self,
        session_id: UUID,
        final_document: dict[str, Any],
        submitted_image_ids: Sequence[str] | None = None,
        context: str | None = None,
        statement_order: int | None = None,
    ) -> dict:
        """
        Complete a session exactly once.

        In one transaction: flip status (only from in_progress), store the
        final document, stamp completed_at on the session and its assignment
        rows, and bump completed_count of every assigned image. A session
        that is already completed, including one completed by a concurrent
        call, is reported as an idempotent success.

        Args:
            session_id: Session UUID
            final_document: Final submission to store
            submitted_image_ids: When given, must equal the assigned set
            context: When given, must equal the session's scenario
            statement_order: When given, must equal the session's statement order

        Returns:
            dict: session_id, status, completed_at, already_completed

        Raises:
            SessionNotFoundError: If the session does not exist
            ImageSetMismatchError / SubmissionMismatchError: Verification failed
        """
        try:
            session = await session_crud.get_by_id(self.db, session_id, fresh=True)
            if session is None:
                raise SessionNotFoundError(session_id)
            if session.status == SessionStatus.COMPLETED:
                result = self._completion_result(session, already_completed=True)
                await self.db.rollback()
                logger.info("Session already completed", extra={"session_id": str(session_id)})
                return result

            self._check_fixed_values(session, context, statement_order)
            if submitted_image_ids is not None:
                await self.verify_image_set(session_id, submitted_image_ids, exact=True)

            now = utcnow()
            transitioned = await session_crud.mark_completed(
                self.db, session_id, final_document, now
            )
            if not transitioned:
                await self.db.rollback()
                current = await session_crud.get_by_id(self.db, session_id, fresh=True)
                if current is None:
                    raise SessionNotFoundError(session_id)
                logger.info(
                    "Concurrent finalize already completed session",
                    extra={"session_id": str(session_id)},
                )
                return self._completion_result(current, already_completed=True)

            await session_image_crud.mark_completed(self.db, session_id, now)
            await image_crud.increment_completed_for_session(self.db, session_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        completed = await session_crud.get_by_id(self.db, session_id, fresh=True)
        logger.info(
            "Session finalized",
            extra={
                "session_id": str(session_id),
                "scenario_id": completed.scenario_id,
                "payload_keys": describe_document(final_document),
            },
        )
        return self._completion_result(completed, already_completed=False)
