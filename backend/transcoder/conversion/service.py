"""Conversion task orchestration and the worker pool that runs tasks."""
import logging
import os
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional

from transcoder.config import Settings
from transcoder.conversion.arguments import build_plan
from transcoder.conversion.exceptions import ConversionError, EngineError, InputMissingError
from transcoder.conversion.models import ConversionRequest, PipelinePlan, TaskResult
from transcoder.conversion.runner import run_ffmpeg

logger = logging.getLogger("transcoder.service")

Runner = Callable[..., None]


class ConversionTask:
    """Runs one ConversionRequest end to end and reports a single TaskResult."""

    def __init__(
        self,
        request: ConversionRequest,
        settings: Settings,
        runner: Runner = run_ffmpeg,
        task_id: Optional[str] = None,
    ):
        self.request = request
        self.settings = settings
        self.task_id = task_id or uuid.uuid4().hex
        self._runner = runner
        self.input_path = settings.input_dir / request.input_file

    def run(self) -> TaskResult:
        req = self.request
        plan: Optional[PipelinePlan] = None
        try:
            self._ensure_directories()
            self._validate_input()
            logger.info("Starting task %s: %s -> %s", self.task_id[:8], req.input_file, req.format)
            plan = build_plan(
                req,
                self.input_path,
                self.settings.output_dir,
                self.task_id,
                default_crf=self.settings.default_crf,
            )
            self._execute(plan)
            if plan.is_two_stage:
                self._finish_two_stage(plan)
        except EngineError as e:
            # The runner already logged the diagnostics.
            logger.info("Task %s failed for %s", self.task_id[:8], req.input_file)
            self._discard_partial_output(plan)
            return TaskResult.failed(str(e))
        except (ConversionError, OSError) as e:
            logger.warning("Task %s failed for %s: %s", self.task_id[:8], req.input_file, e)
            self._discard_partial_output(plan)
            return TaskResult.failed(str(e))

        self._remove(self.input_path, "input")
        elapsed = time.monotonic() - req.started_at
        logger.info("Converted %s -> %s in %.2fs", req.input_file, req.output_name, elapsed)
        return TaskResult.ok(req.output_name)

    def _ensure_directories(self) -> None:
        self.settings.input_dir.mkdir(parents=True, exist_ok=True)
        self.settings.output_dir.mkdir(parents=True, exist_ok=True)

    def _validate_input(self) -> None:
        if not (self.input_path.is_file() and os.access(self.input_path, os.R_OK)):
            raise InputMissingError(f"Input file not found: {self.input_path}")

    def _execute(self, plan: PipelinePlan) -> None:
        total = len(plan.invocations)
        for i, invocation in enumerate(plan.invocations, start=1):
            logger.info("Task %s stage %s/%s (%s)", self.task_id[:8], i, total, invocation.label)
            self._runner(invocation.args, binary=self.settings.ffmpeg_binary, cwd=self.settings.work_dir)

    def _finish_two_stage(self, plan: PipelinePlan) -> None:
        # Palette and temp GIF stay on disk if an earlier stage failed.
        os.replace(plan.temp_path, plan.output_path)
        self._remove(plan.palette_path, "palette")

    def _discard_partial_output(self, plan: Optional[PipelinePlan]) -> None:
        # Only the final output; GIF palette and temp artifacts are kept for diagnosis.
        if plan is not None and plan.output_path.exists():
            self._remove(plan.output_path, "partial output")

    @staticmethod
    def _remove(path: Path, what: str) -> None:
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Could not remove %s %s: %s", what, path, e)


class ConversionService:
    """Owns the worker pool; each request runs as its own ConversionTask."""

    def __init__(self, settings: Settings, runner: Runner = run_ffmpeg):
        self.settings = settings
        self._runner = runner
        self._executor = ThreadPoolExecutor(max_workers=settings.max_workers)
        logger.info("ConversionService initialized with max_workers=%s", settings.max_workers)

    def _create_task(self, request: ConversionRequest) -> ConversionTask:
        return ConversionTask(request, self.settings, runner=self._runner)

    def convert(self, request: ConversionRequest) -> TaskResult:
        """Run a conversion in the calling thread."""
        return self._create_task(request).run()

    def submit(self, request: ConversionRequest) -> "Future[TaskResult]":
        """Schedule a conversion; the future resolves once with its TaskResult."""
        return self._executor.submit(self._create_task(request).run)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
        logger.info("ConversionService shut down")
