"""Pipeline orchestration for the `build` flow."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import DocMapConfig, load_config
from .context import RunContext
from .coverage.analyzer import AuthDetector, CoverageAnalyzer, CoverageSettings
from .coverage.categorizer import categorize_cases
from .coverage.correlator import find_entity_tests, find_module_tests
from .coverage.stats import CorpusSummary, category_stats, summarize_corpus
from .graph.assembler import EntityGraph, GraphAssembler
from .graph.references import derive_table_usage
from .loaders import LoadReport, load_feature_map, load_test_cases
from .logging import get_logger, log_counts
from .models import CoverageAnalysis, EntityKind, ExportRecord, TestCase
from .stores.snapshot import SnapshotStore

# Kinds that get a module overview page with its own test list.
OVERVIEW_KINDS: Tuple[EntityKind, ...] = (
    EntityKind.SCREEN,
    EntityKind.COMPONENT,
    EntityKind.ACTION,
    EntityKind.TABLE,
)


@dataclass
class RunOutcome:
    """Result of a documentation build."""

    config: DocMapConfig
    context: RunContext
    graph: EntityGraph
    summary: CorpusSummary
    reports: List[LoadReport] = field(default_factory=list)
    snapshot_path: Optional[Path] = None

    @property
    def excluded(self) -> int:
        return sum(len(report.excluded) for report in self.reports)

    def counts(self) -> Dict[str, int]:
        return self.context.registry.counts()


class Orchestrator:
    """Coordinates loading, graph assembly and coverage analysis for a project."""

    def __init__(
        self,
        assembler: GraphAssembler | None = None,
        analyzer: CoverageAnalyzer | None = None,
        auth_detector: AuthDetector | None = None,
    ) -> None:
        self._assembler = assembler
        self._analyzer = analyzer
        self._auth_detector = auth_detector
        self.logger = get_logger("orchestrator")

    def run(self, path: str | Path, *, output: Path | None = None) -> RunOutcome:
        """Build the project at ``path`` and write its snapshot."""
        outcome = self.build(path)
        self.write(outcome, output=output)
        return outcome

    def write(self, outcome: RunOutcome, *, output: Path | None = None) -> Path:
        """Write the snapshot for ``outcome`` and return where it landed."""
        store = SnapshotStore(output or outcome.config.paths.output)
        snapshot_path = store.write(outcome.context, summary=outcome.summary)
        outcome.snapshot_path = snapshot_path
        self.logger.info("Snapshot written to %s", snapshot_path)
        return snapshot_path

    def build(self, path: str | Path) -> RunOutcome:
        """Assemble the entity graph and coverage analysis without writing anything."""
        project_path = Path(path).expanduser().resolve()
        self.logger.info("Starting build for %s", project_path)
        config = load_config(project_path)

        feature_map, map_report = load_feature_map(config.paths.feature_map)
        test_cases, cases_report = self._load_corpus(config.paths.test_cases)
        if config.references.derive_table_usage:
            feature_map = derive_table_usage(feature_map)

        context = RunContext(
            test_cases=test_cases,
            module_descriptions=dict(feature_map.module_descriptions),
        )
        assembler = self._assembler or GraphAssembler(config.modules.structural_dirs)
        graph = assembler.assemble(feature_map, context)
        log_counts(self.logger, "Registered entities:", context.registry.counts())

        analyzer = self._analyzer or CoverageAnalyzer(
            CoverageSettings(
                weights=dict(config.coverage.weights),
                volume_bonuses=list(config.coverage.volume_bonuses),
                covered_threshold=config.coverage.covered_threshold,
            )
        )
        detector = self._auth_detector or AuthDetector(config.coverage.auth_patterns)
        self._analyze_coverage(context, config, analyzer, detector)
        self._collect_module_tests(context, graph)

        summary = summarize_corpus(context.test_cases)
        self.logger.info(
            "Correlated %d test cases across %d files", summary.total_tests, summary.total_files
        )
        log_counts(self.logger, "Test categories:", category_stats(context.test_cases))
        return RunOutcome(
            config=config,
            context=context,
            graph=graph,
            summary=summary,
            reports=[map_report, cases_report],
        )

    def _load_corpus(self, path: Path) -> Tuple[List[TestCase], LoadReport]:
        if not path.exists():
            self.logger.warning("Test case file %s not found; coverage will be empty", path)
            return [], LoadReport(source=path.name)
        return load_test_cases(path)

    def _analyze_coverage(
        self,
        context: RunContext,
        config: DocMapConfig,
        analyzer: CoverageAnalyzer,
        detector: AuthDetector,
    ) -> None:
        records = list(context.export.values())

        def analyze(record: ExportRecord) -> Tuple[str, CoverageAnalysis]:
            matches = find_entity_tests(record.name, record.path, context.test_cases)
            analysis = analyzer.analyze(
                categorize_cases(matches),
                touches_auth=self._touches_auth(record, config.paths.source_root, detector),
                touches_storage=_touches_storage(record),
            )
            return record.key, analysis

        results: Dict[str, CoverageAnalysis] = {}
        if config.workers > 1 and len(records) > 1:
            with ThreadPoolExecutor(max_workers=config.workers) as executor:
                futures = [executor.submit(analyze, record) for record in records]
                for future in as_completed(futures):
                    key, analysis = future.result()
                    results[key] = analysis
        else:
            for record in records:
                key, analysis = analyze(record)
                results[key] = analysis

        # Assign in export order so the snapshot does not depend on completion order.
        for record in records:
            record.coverage = results[record.key]

    def _touches_auth(self, record: ExportRecord, source_root: Path, detector: AuthDetector) -> bool:
        if record.kind is not EntityKind.ACTION:
            return False
        source_path = source_root / record.path
        try:
            source = source_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.debug("Skipping auth detection for %s: %s", record.key, exc)
            return False
        return detector.touches_auth(source)

    @staticmethod
    def _collect_module_tests(context: RunContext, graph: EntityGraph) -> None:
        for kind in OVERVIEW_KINDS:
            for module in graph.modules_of_kind(kind):
                matches = find_module_tests(module, kind.value, context.test_cases)
                context.module_tests[f"{kind.value}/{module}"] = categorize_cases(matches)


def _touches_storage(record: ExportRecord) -> bool:
    if record.kind is EntityKind.TABLE:
        return True
    return record.kind is EntityKind.ACTION and bool(record.related.get("dbTables"))


__all__ = ["OVERVIEW_KINDS", "Orchestrator", "RunOutcome"]
