"""Batch completeness evaluation across every line of a project.

Resolves classification once, then runs one load-and-score pipeline per line
concurrently. Each pipeline is isolated: a failing line degrades to a 0% result
without affecting its siblings, and the batch itself never raises.

Runs are numbered with a monotonically increasing token. Only the pipelines of
the newest run may write into the orchestrator's result map, so a slow stale
run can never overwrite results from a run that started after it.

Usage:
    orchestrator = CompletenessOrchestrator()
    outcome = await orchestrator.evaluate_project(project_id, lines)
    if outcome.all_complete:
        ...
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence

import structlog
from sqlalchemy.exc import SQLAlchemyError

from linecomplete.classification.resolver import ClassificationResolver
from linecomplete.completeness.scorer import (
    ERROR_CATEGORY,
    EVALUATION_FAILED_GAP,
    classification_for,
    degraded_result,
    evaluate_line,
)
from linecomplete.config import get_config
from linecomplete.db.connection import SessionFactory, get_session
from linecomplete.db.line_queries import fetch_project_lines
from linecomplete.db.snapshot_loader import SnapshotLoader
from linecomplete.errors import SnapshotLoadError
from linecomplete.models import (
    Classification,
    CompletenessResult,
    Line,
    LineTableKind,
    ProjectCompleteness,
)

logger = structlog.get_logger(__name__)


class CompletenessOrchestrator:
    """Evaluates all lines of a project and keeps the latest results."""

    def __init__(
        self,
        resolver: ClassificationResolver | None = None,
        loader: SnapshotLoader | None = None,
        session_factory: SessionFactory | None = None,
        max_concurrency: int | None = None,
        kind: LineTableKind | None = None,
    ):
        """Initialize orchestrator.

        Args:
            resolver: Classification resolver (default: database-backed)
            loader: Snapshot loader (default: database-backed)
            session_factory: Session factory for the default resolver/loader
            max_concurrency: Lines evaluated at once (default: from config)
            kind: Table line ids refer to (default: from config)
        """
        if max_concurrency is None or kind is None:
            completeness_config = get_config().completeness
            max_concurrency = max_concurrency or completeness_config.max_concurrency
            kind = kind or completeness_config.line_table

        self.resolver = resolver or ClassificationResolver(session_factory)
        self.loader = loader or SnapshotLoader(session_factory)
        self.max_concurrency = max_concurrency
        self.kind = kind

        self._results: dict[str, CompletenessResult] = {}
        self._loading = False
        self._run_token = 0
        self._last_inputs: tuple[str, list[Line]] | None = None

    @property
    def results(self) -> dict[str, CompletenessResult]:
        return dict(self._results)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def run_token(self) -> int:
        return self._run_token

    @property
    def state(self) -> ProjectCompleteness:
        return ProjectCompleteness(results=self.results, loading=self._loading)

    def _is_current(self, token: int) -> bool:
        return token == self._run_token

    async def evaluate_project(
        self, project_id: str, lines: Sequence[Line]
    ) -> ProjectCompleteness:
        """Evaluate every line of a project concurrently.

        Args:
            project_id: Solutions project the lines belong to
            lines: Lines to evaluate

        Returns:
            ProjectCompleteness keyed by line id. ``superseded`` is set when a
            newer run started before this one settled; its results were not
            committed.

        The shared result map is cleared when a run starts and filled as each
        line settles, so it never mixes lines from different runs.
        """
        self._run_token += 1
        token = self._run_token
        self._last_inputs = (project_id, list(lines))
        log = logger.bind(project_id=project_id, run_token=token)

        if not lines:
            self._results = {}
            self._loading = False
            return ProjectCompleteness()

        self._results = {}
        self._loading = True
        log.info("completeness_run_started", lines=len(lines))

        try:
            classification_map = await self._resolve_classifications(project_id, log)

            semaphore = asyncio.Semaphore(self.max_concurrency)
            run_results: dict[str, CompletenessResult] = {}

            async def run_line(line: Line) -> None:
                async with semaphore:
                    result = await self._evaluate_one(line, classification_map, log)
                run_results[line.id] = result
                if self._is_current(token):
                    self._results[line.id] = result

            await asyncio.gather(*(run_line(line) for line in lines))
        finally:
            # Cancelled or not, the newest run owns the loading flag
            if self._is_current(token):
                self._loading = False

        ordered = {line.id: run_results[line.id] for line in lines}

        if not self._is_current(token):
            log.info("completeness_run_superseded", latest_token=self._run_token)
            return ProjectCompleteness(
                results=ordered, loading=self._loading, superseded=True
            )

        self._results = dict(ordered)

        complete = sum(1 for r in ordered.values() if r.is_complete)
        log.info("completeness_run_finished", lines=len(ordered), complete=complete)
        return ProjectCompleteness(results=ordered, loading=False)

    async def refresh(self) -> ProjectCompleteness:
        """Re-run the last evaluation with the same inputs."""
        if self._last_inputs is None:
            return self.state
        project_id, lines = self._last_inputs
        return await self.evaluate_project(project_id, lines)

    async def _resolve_classifications(
        self, project_id: str, log
    ) -> Mapping[str, Classification]:
        try:
            return await self.resolver.resolve(project_id)
        except Exception:
            log.error("classification_resolve_failed", exc_info=True)
            return {}

    async def _evaluate_one(
        self,
        line: Line,
        classification_map: Mapping[str, Classification],
        log,
    ) -> CompletenessResult:
        """Load and score one line. Never raises."""
        classification = classification_for(line.line_name, classification_map)

        try:
            snapshot = await self.loader.load(line.id, self.kind)
        except SnapshotLoadError as e:
            log.warning("snapshot_load_failed", line_id=line.id, reason=e.reason)
            return evaluate_line(line, e, classification)
        except Exception:
            log.error("line_pipeline_failed", line_id=line.id, exc_info=True)
            return degraded_result(line.id, ERROR_CATEGORY, EVALUATION_FAILED_GAP)

        return evaluate_line(line, snapshot, classification)


async def check_all_lines_complete(
    project_id: str,
    orchestrator: CompletenessOrchestrator | None = None,
    session_factory: SessionFactory | None = None,
) -> bool:
    """Sign-off gate: True only if the project has lines and all are 100%.

    Args:
        project_id: Solutions project to check
        orchestrator: Orchestrator to evaluate with (default: database-backed)
        session_factory: Session factory for loading the project's lines

    Returns:
        False when the project has no lines or they cannot be loaded
    """
    session_factory = session_factory or get_session

    try:
        async with session_factory() as session:
            lines = await fetch_project_lines(session, project_id)
    except (SQLAlchemyError, OSError) as e:
        logger.error("project_lines_load_failed", project_id=project_id, error=str(e))
        return False

    if not lines:
        return False

    orchestrator = orchestrator or CompletenessOrchestrator(session_factory=session_factory)
    outcome = await orchestrator.evaluate_project(project_id, lines)
    return all(result.is_complete for result in outcome.results.values())
