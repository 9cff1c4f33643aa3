class FitnessError(Exception):
    """Base class for errors surfaced to the user as a message."""


class GoalRequiredError(FitnessError):
    def __init__(self, action: str = "build a plan"):
        self.action = action
        super().__init__(f"Set a primary goal first to {action}.")
