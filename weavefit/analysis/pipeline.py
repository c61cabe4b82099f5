# weavefit/analysis/pipeline.py
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from weavefit import logs
from weavefit.analysis.context import AnalysisContext, TargetState
from weavefit.config.app_config import AppConfig
from weavefit.observability.instrumentation import Instrumentation
from weavefit.pipeline.step import PipelineStep
from weavefit.utils.errors import WeavefitError
from weavefit.utils.path import PathManager


class AnalysisPipeline:
    """
    AnalysisPipeline（FINAL / FROZEN）

    Semantics:
    - setup steps run once; any error there is fatal
    - Pipeline owns target iteration; target steps run once per target
      with a fresh TargetState
    - an error escaping a target step fails every remaining method of
      that target, then the next target runs
    - final steps (report / persist) run once over all results
    """

    def __init__(
            self,
            *,
            setup_steps: List[PipelineStep],
            target_steps: List[PipelineStep],
            final_steps: List[PipelineStep],
            inst: Instrumentation,
            cfg: AppConfig,
            output_dir: Optional[Path] = None,
    ):
        self.setup_steps = setup_steps
        self.target_steps = target_steps
        self.final_steps = final_steps
        self.inst = inst
        self.cfg = cfg
        self.output_dir = output_dir

    @logs.catch(msg="analysis run aborted")
    def run(self, run_id: str | None = None) -> AnalysisContext:
        if run_id is None:
            run_id = datetime.now().strftime("%Y%m%d-%H%M%S")

        output_dir = (
            Path(self.output_dir) / run_id
            if self.output_dir is not None
            else PathManager.run_dir(run_id, self.cfg.pipeline.output_dir)
        )

        logs.info(f"[AnalysisPipeline] START run_id={run_id} output={output_dir}")

        ctx = AnalysisContext(
            run_id=run_id,
            cfg=self.cfg,
            inst=self.inst,
            output_dir=output_dir,
        )

        # ------------------------------
        # Setup (fatal on error)
        # ------------------------------
        for step in self.setup_steps:
            with step.timed():
                ctx = step.run(ctx)

        # ------------------------------
        # Per-target pipelines
        # ------------------------------
        for index, target in enumerate(ctx.schema.targets):
            state = TargetState(
                target=target,
                index=index,
                predictors=ctx.schema.predictors_for(target),
            )
            ctx.current = state
            ctx.targets[target] = state

            logs.info(
                f"[AnalysisPipeline] target={target} "
                f"predictors={len(state.predictors)}"
            )

            try:
                for step in self.target_steps:
                    with step.timed():
                        ctx = step.run(ctx)
            except WeavefitError as e:
                self._fail_target(ctx, target, e)

        ctx.current = None

        # ------------------------------
        # Final steps (reports)
        # ------------------------------
        for step in self.final_steps:
            with step.timed():
                ctx = step.run(ctx)

        self.inst.generate_timeline_report(run_id)

        logs.info(
            f"[AnalysisPipeline] DONE models={len(ctx.models)} "
            f"evaluations={len(ctx.evaluations)} failures={len(ctx.failures)}"
        )
        return ctx

    # ------------------------------------------------------------------
    def _fail_target(self, ctx: AnalysisContext, target: str, err: WeavefitError) -> None:
        """
        Record the error once per method that has neither an evaluation
        nor a failure for this target yet.
        """
        logs.error(f"[AnalysisPipeline] target={target} aborted: {err}")

        evaluated = {(e.method.value, e.target) for e in ctx.evaluations}
        for method in self.cfg.analysis.methods:
            if (method.value, target) in evaluated or ctx.failed(method.value, target):
                continue
            failure = type(err)(
                err.message,
                method=method.value,
                target=target,
                penalty=err.penalty,
            )
            ctx.record_failure(failure, stage="target")
