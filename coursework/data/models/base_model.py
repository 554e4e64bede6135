"""
Base model classes shared by coursework records.

Contains the rights table every permission-bearing record carries and the
capability-check interface the bucketing engine uses to ask
"may this actor do that to this subject?" without depending on the models.
"""

from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from coursework.data.models.enums import Right

# (subject, actor, right) -> granted?
CapabilityCheck = Callable[[Any, Optional[str], Right], bool]


class PermissionedModel(BaseModel):
    """Record that grants rights to actors through a rights table."""

    rights: Dict[str, List[Right]] = Field(default_factory=dict)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"rights": {"instructor-1": ["grade", "manage_grades"]}}
        },
    )

    def grants_right(self, actor: Optional[str], right: Union[Right, str]) -> bool:
        """
        Check whether the actor holds a right on this record.

        Args:
            actor: Actor identifier (None never holds any right)
            right: Right to check

        Returns:
            bool: True if the right is granted
        """
        if actor is None:
            return False
        return Right(right) in self.rights.get(actor, [])


def grants_right(subject: Any, actor: Optional[str], right: Right) -> bool:
    """Default capability check, delegating to the subject's rights table."""
    return bool(subject.grants_right(actor, right))
