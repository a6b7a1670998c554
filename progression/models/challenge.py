"""Daily challenge models"""
from pydantic import BaseModel, Field


class ChallengeTemplate(BaseModel):
    """Entry of the daily challenge pool"""

    id: str
    title: str
    description: str
    points: int = Field(ge=0)
    xp: int = Field(ge=0)
    icon: str
    type: str

    def instantiate(self) -> "DailyChallenge":
        """Fresh, not yet completed instance of this template"""
        return DailyChallenge(**self.model_dump(), completed=False)


class DailyChallenge(ChallengeTemplate):
    """A challenge assigned for one day; completion is terminal"""

    completed: bool = False
