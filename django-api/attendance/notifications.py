"""Append-only notification feed for external indexers.

Services send these once the unit of work has committed, through ``notify``.
It uses ``send_robust``, so a failing receiver never touches committed state;
Django logs the receiver's exception on the ``django.dispatch`` logger.
"""

from django.dispatch import Signal

# kwargs: event_id, name, date, location
event_created = Signal()

# kwargs: event_id, identity, credential_id, serial_number
credential_minted = Signal()


def notify(signal: Signal, sender, **payload):
    """Send ``signal`` to every receiver, isolating receivers that raise."""
    return signal.send_robust(sender=sender, **payload)
