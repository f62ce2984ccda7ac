"""Job Payment State Machine Guard.

Uses python-statemachine to enforce that a job is paid at most once. However
the payment flow is reached, firing `pay` on a job that is already PAID raises
TransitionNotAllowed.

Transition table:
    UNPAID -> PAID   (pay)

PAID is final: a paid job never goes back.
"""

from __future__ import annotations

from statemachine import State, StateMachine

from marketplace_api.domain.enums import PaymentStatus


class JobPaymentStateMachine(StateMachine):
    """State machine guarding the payment of a single job.

    Usage:
        sm = JobPaymentStateMachine(current_status="UNPAID")
        sm.pay()
        sm.status  # "PAID"
    """

    UNPAID = State("UNPAID", initial=True)
    PAID = State("PAID", final=True)

    pay = UNPAID.to(PAID)

    def __init__(self, current_status: str = PaymentStatus.UNPAID) -> None:
        valid_values = {s.value for s in self.states}
        if current_status not in valid_values:
            valid = ", ".join(sorted(valid_values))
            raise ValueError(
                f"Unknown payment status '{current_status}'. Valid states: {valid}"
            )
        super().__init__(start_value=str(current_status))

    @property
    def status(self) -> str:
        return str(self.current_state.value)
