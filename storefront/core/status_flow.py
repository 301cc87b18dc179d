from storefront.core.constants import STATUS_FLOW


def next_status(current):
    """Return the status after `current` in the delivery flow, or None.

    None means the order is terminal or its status is outside the linear
    flow (for example a seller order still awaiting confirmation).
    """
    try:
        idx = STATUS_FLOW.index(current)
    except ValueError:
        return None
    if idx >= len(STATUS_FLOW) - 1:
        return None
    return STATUS_FLOW[idx + 1]


def is_terminal(status):
    return status == STATUS_FLOW[-1]
