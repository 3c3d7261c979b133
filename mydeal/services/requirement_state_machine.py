from transitions import Machine, MachineError
from mydeal.models.errors import RequirementClosedError
from mydeal.models.requests import ProductRequirement
from mydeal.core.logging_config import logger

class RequirementStateMachine:
    states = [
        "OPEN",
        "CLOSED",
    ]

    def __init__(self, requirement: ProductRequirement):
        self.requirement = requirement
        self.requirement_id = requirement.id
        self.machine = Machine(
            model=self,
            states=RequirementStateMachine.states,
            initial=requirement.status.value,
            send_event=True,
            auto_transitions=False,
        )

        self.machine.add_transition("accept_bids", "OPEN", "OPEN")
        self.machine.add_transition("close", "OPEN", "CLOSED")

    def on_enter_CLOSED(self, event):
        logger.info(f"Requirement {self.requirement_id} entered state CLOSED")

    def ensure_open(self) -> None:
        """Бросает RequirementClosedError, если заявка уже не принимает ставки."""
        self._fire("accept_bids")

    def close_deal(self) -> None:
        self._fire("close")

    def _fire(self, trigger: str) -> None:
        try:
            self.trigger(trigger)
        except MachineError:
            logger.warning(f"Requirement {self.requirement_id}: '{trigger}' rejected in state {self.state}")
            raise RequirementClosedError(
                f"Requirement '{self.requirement_id}' is {self.state}", self.requirement_id
            )
