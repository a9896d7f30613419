"""Extension graph between targets.

A target that ``extends`` other targets folds their files and settings into its
own build artifact. The relation is kept as two adjacency tables indexed like
the target table:

    extends[i]  - targets named by target i, in declared order
    extended[j] - targets whose extends list names target j, ascending

Composition is one level deep: ``composed`` takes the direct extends of a
target followed by the target itself.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, TypeVar

from nativegen.config.model import Project
from nativegen.core.exceptions import TargetReferenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Adjacency = Tuple[Tuple[int, ...], ...]


@dataclass(frozen=True)
class ExtensionGraph:
    """Forward and inverse extends adjacency."""

    names: Tuple[str, ...]
    extends: Adjacency
    extended: Adjacency

    @classmethod
    def build(cls, names: Sequence[str], extends: Sequence[Sequence[str]]):
        """Build the graph from target names and their extends lists.

        Args:
            names: Target names in declaration order
            extends: For each target, the names it extends

        Raises:
            TargetReferenceError: On an unknown name or an extends cycle
        """
        names = tuple(names)
        positions: Dict[str, int] = {name: i for i, name in enumerate(names)}

        forward: List[Tuple[int, ...]] = []
        for name, targets in zip(names, extends):
            indices = []
            for target_name in targets:
                if target_name not in positions:
                    raise TargetReferenceError(
                        f"No such target to extend: {target_name} "
                        f"(referenced by {name})"
                    )
                indices.append(positions[target_name])
            forward.append(tuple(indices))

        inverse: List[Tuple[int, ...]] = [
            tuple(j for j, indices in enumerate(forward) if i in indices)
            for i in range(len(names))
        ]

        graph = cls(names=names, extends=tuple(forward), extended=tuple(inverse))
        graph._check_acyclic()
        logger.debug(f"Built extension graph for {len(names)} targets")
        return graph

    @classmethod
    def from_project(cls, project: Project) -> "ExtensionGraph":
        return cls.build(
            project.target_names,
            [target.extends for target in project.targets.values()],
        )

    def _check_acyclic(self) -> None:
        """Reject extends cycles, reporting the first one found as a name path."""
        done = set()

        def visit(index: int, path: List[int]) -> None:
            if index in path:
                cycle = path[path.index(index) :] + [index]
                raise TargetReferenceError(
                    "Circular extends detected: "
                    + " -> ".join(self.names[i] for i in cycle)
                )
            if index in done:
                return
            path.append(index)
            for next_index in self.extends[index]:
                visit(next_index, path)
            path.pop()
            done.add(index)

        for index in range(len(self.names)):
            visit(index, [])

    def composed(self, index: int, per_target: Sequence[Sequence[T]]) -> Tuple[T, ...]:
        """Concatenate per-target values for the extends of a target, then its own.

        Args:
            index: Target index
            per_target: Values indexed like the target table

        Returns:
            Values of extends[index] in declared order followed by the target's
        """
        result: List[T] = []
        for extend_index in self.extends[index]:
            result.extend(per_target[extend_index])
        result.extend(per_target[index])
        return tuple(result)

    def nested(self, index: int) -> Tuple[int, ...]:
        """Targets reached through extends chains deeper than one level.

        These are not folded by ``composed``.
        """
        direct = set(self.extends[index])
        seen: List[int] = []
        stack = [i for e in reversed(self.extends[index]) for i in reversed(self.extends[e])]
        while stack:
            current = stack.pop()
            if current in direct or current in seen or current == index:
                continue
            seen.append(current)
            stack.extend(reversed(self.extends[current]))
        return tuple(seen)
