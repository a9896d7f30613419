"""Semantic validation of a resolved project.

Loading already rejects schema, reference and version errors. This module
looks at the resolved context for configurations that load fine but are likely
unintended: filters that exclude everything, architectures no allowed platform
can target, profile variants that can never apply, and extends chains deeper
than the one level that generators fold.
"""

import logging
from dataclasses import dataclass
from typing import List

from nativegen.config.types import CONCRETE_PLATFORMS, Architecture, PlatformType
from nativegen.context import COMPILED_EXTENSIONS, ResolvedContext
from nativegen.core.platforms import get_platform

logger = logging.getLogger(__name__)


@dataclass
class ValidationIssue:
    """A single validation issue."""

    level: str  # 'error', 'warning', 'info'
    field: str  # Document key path
    message: str  # Human-readable message
    suggestion: str  # How to fix it


@dataclass
class ValidationResult:
    """Result of project validation."""

    valid: bool
    issues: List[ValidationIssue]


class ConfigValidator:
    """Validates a resolved project."""

    def __init__(self, ctx: ResolvedContext):
        """
        Initialize validator.

        Args:
            ctx: Resolved context to inspect
        """
        self.ctx = ctx
        self.issues: List[ValidationIssue] = []

    def validate(self) -> ValidationResult:
        """
        Run every check.

        Returns:
            ValidationResult with any issues found
        """
        self.issues = []

        self._validate_project_filter()
        for index in range(len(self.ctx.target_names)):
            self._validate_target_filter(index)
            self._validate_target_files(index)
            self._validate_depends(index)
            self._validate_extends(index)
            self._validate_exclude(index)
        self._validate_profiles()

        has_errors = any(issue.level == "error" for issue in self.issues)
        logger.debug(f"Validation finished with {len(self.issues)} issue(s)")
        return ValidationResult(valid=not has_errors, issues=self.issues)

    def _validate_project_filter(self):
        project_filter = self.ctx.project.filter
        self._check_architectures(
            "project.architectures",
            project_filter.architectures,
            [p for p in CONCRETE_PLATFORMS if project_filter.matches_platform(p)],
        )

    def _validate_target_filter(self, index: int):
        name = self.ctx.target_names[index]
        target = self.ctx.target(index)
        platforms = self.ctx.buildable_platforms(index)

        if not platforms:
            self._add_error(
                f"targets.{name}.platforms",
                "Target is not buildable on any platform allowed by the project",
                "Make the target's platforms overlap project.platforms",
            )
            return

        self._check_architectures(
            f"targets.{name}.architectures", target.filter.architectures, platforms
        )

        for profile_name, variants in target.profiles.items():
            for variant in variants:
                if (
                    not variant.platform.is_wildcard
                    and variant.platform not in platforms
                ):
                    self._add_warning(
                        f"targets.{name}.profiles.{profile_name}",
                        f"Variant for {variant.platform} never applies: "
                        "the target is not built there",
                        "Remove the variant or allow the platform",
                    )

    def _validate_target_files(self, index: int):
        name = self.ctx.target_names[index]
        target = self.ctx.target(index)

        if target.sources and not self.ctx.sources[index]:
            self._add_warning(
                f"targets.{name}.sources",
                "Source patterns matched no files",
                "Check the patterns against the project folder",
            )

        if target.assets and not self.ctx.assets[index]:
            self._add_warning(
                f"targets.{name}.assets",
                f"Asset folder {target.assets} is empty or missing",
                "Create the folder or remove the assets key",
            )

        if target.target_type.is_wildcard:
            compiled = [
                f
                for f in self.ctx.composed_sources(index)
                if f.is_file and f.extension.lower() in COMPILED_EXTENSIONS
            ]
            if not compiled:
                self._add_info(
                    f"targets.{name}.type",
                    "No compilable sources: the target only holds files",
                    'Set type = "None" to make this explicit',
                )

    def _validate_depends(self, index: int):
        name = self.ctx.target_names[index]
        for dependency in self.ctx.target(index).depends:
            if dependency not in self.ctx.target_names:
                self._add_warning(
                    f"targets.{name}.depends",
                    f"Unknown dependency: {dependency}",
                    "Use a declared target name",
                )

    def _validate_extends(self, index: int):
        name = self.ctx.target_names[index]
        for nested in self.ctx.graph.nested(index):
            self._add_warning(
                f"targets.{name}.extends",
                f"{self.ctx.target_names[nested]} is only reached through another "
                "extended target and is not folded in",
                f"Add {self.ctx.target_names[nested]} to the extends list directly",
            )

        for extend_index in self.ctx.extends[index]:
            missing = [
                p
                for p in self.ctx.buildable_platforms(index)
                if not self.ctx.is_buildable(extend_index, p)
            ]
            if missing:
                self._add_warning(
                    f"targets.{name}.extends",
                    f"{self.ctx.target_names[extend_index]} is not buildable on "
                    f"{', '.join(p.value for p in missing)} but is folded in there",
                    "Align the platform filters of both targets",
                )

    def _validate_exclude(self, index: int):
        name = self.ctx.target_names[index]
        platforms = self.ctx.buildable_platforms(index)
        for directory, excluded in self.ctx.target(index).exclude.items():
            for platform in excluded:
                if platform not in platforms:
                    self._add_info(
                        f"targets.{name}.exclude",
                        f"{directory} is excluded on {platform}, "
                        "where the target is not built anyway",
                        "Remove the platform from the exclusion",
                    )

    def _validate_profiles(self):
        for profile_name in self.ctx.profiles:
            declared_by = self.ctx.catalog.declared_by(profile_name)
            if not declared_by:
                continue
            if any(
                not self.ctx.catalog.declares(t, profile_name)
                for t in self.ctx.target_names
            ):
                self._add_info(
                    f"profiles.{profile_name}",
                    f"Profile declared only by {', '.join(declared_by)}; "
                    "other targets use fallback settings for it",
                    f"Declare {profile_name} at project level to make it explicit",
                )

    def _check_architectures(
        self,
        field: str,
        architectures: List[Architecture],
        platforms: List[PlatformType],
    ):
        for architecture in architectures:
            if not any(
                get_platform(p).supports_architecture(architecture) for p in platforms
            ):
                self._add_warning(
                    field,
                    f"No allowed platform supports {architecture}",
                    "Remove the architecture or allow a platform that supports it",
                )

    def _add_error(self, field: str, message: str, suggestion: str):
        """Add error issue."""
        self.issues.append(
            ValidationIssue(
                level="error", field=field, message=message, suggestion=suggestion
            )
        )

    def _add_warning(self, field: str, message: str, suggestion: str):
        """Add warning issue."""
        self.issues.append(
            ValidationIssue(
                level="warning", field=field, message=message, suggestion=suggestion
            )
        )

    def _add_info(self, field: str, message: str, suggestion: str):
        """Add info issue."""
        self.issues.append(
            ValidationIssue(
                level="info", field=field, message=message, suggestion=suggestion
            )
        )


def format_validation_results(result: ValidationResult) -> str:
    """
    Format validation results for display.

    Args:
        result: Validation result to format

    Returns:
        Formatted string for display
    """
    if result.valid and not result.issues:
        return "✓ Configuration is valid"

    lines = []

    errors = [i for i in result.issues if i.level == "error"]
    warnings = [i for i in result.issues if i.level == "warning"]
    infos = [i for i in result.issues if i.level == "info"]

    if errors:
        lines.append("❌ Errors:")
        for issue in errors:
            lines.append(f"  {issue.field}: {issue.message}")
            lines.append(f"    → {issue.suggestion}")
        lines.append("")

    if warnings:
        lines.append("⚠️  Warnings:")
        for issue in warnings:
            lines.append(f"  {issue.field}: {issue.message}")
            lines.append(f"    → {issue.suggestion}")
        lines.append("")

    if infos:
        lines.append("ℹ️  Info:")
        for issue in infos:
            lines.append(f"  {issue.field}: {issue.message}")
            lines.append(f"    → {issue.suggestion}")

    return "\n".join(lines).rstrip()
