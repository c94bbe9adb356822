import attrs


@attrs.define(frozen=True)
class CustomerInfo:
    """Purchaser or transferee details as typed by the customer."""

    first_name: str
    last_name: str
    email: str
