"""Monitor role resolution.

Maps active outputs to positional roles (main/left/right) from their
left-to-right order and the primary flag. Output names never influence the
result.
"""

import logging
from typing import Dict, List

from .display_catalog import sort_outputs
from .models import MonitorRole, MonitorRoleAssignment, Output

logger = logging.getLogger(__name__)

# Roles handed out, in order, to active non-primary outputs sorted by x.
# Second and third both map to RIGHT; a fourth and later get no role.
POSITIONAL_ROLES = [MonitorRole.LEFT, MonitorRole.RIGHT, MonitorRole.RIGHT]


class MonitorRoleResolver:
    """Resolves monitor roles to physical outputs.

    Resolution logic:
    1. Filter to active outputs only
    2. Sort ascending by x (stable)
    3. Primary output becomes MAIN wherever it sits
    4. Remaining outputs take LEFT, RIGHT, RIGHT in sort order
    """

    def resolve(self, outputs: List[Output]) -> List[MonitorRoleAssignment]:
        """Assign roles to active outputs.

        Args:
            outputs: Outputs from the display catalog, in any order

        Returns:
            Assignments in left-to-right order. An output appears at most once.
        """
        active = sort_outputs([o for o in outputs if o.active])
        if not active:
            logger.error("No active outputs available for role assignment")
            return []

        assignments = []
        positional = iter(POSITIONAL_ROLES)

        for idx, output in enumerate(active):
            if output.is_primary:
                role = MonitorRole.MAIN
            else:
                role = next(positional, None)
                if role is None:
                    logger.warning(f"No role left for output {output.name} (position {idx})")
                    continue

            assignments.append(MonitorRoleAssignment(role=role, output=output.name, sort_index=idx))

        logger.info(
            "Monitor role assignments: "
            + ", ".join(f"{a.role.value}→{a.output}" for a in assignments)
        )
        return assignments

    def role_map(self, outputs: List[Output]) -> Dict[MonitorRole, str]:
        """Collapse assignments to one output name per role.

        When two outputs share RIGHT, the rightmost one wins.
        """
        mapping: Dict[MonitorRole, str] = {}
        for assignment in self.resolve(outputs):
            mapping[assignment.role] = assignment.output
        return mapping
