"""
Delivery Timelines Core Metadata
--------------------------------
Project identity shared by the backend (API version) and the UI footer.
"""

__project__ = "Delivery Timelines"
__version__ = "1.0.0"

CORE_METADATA = {
    "project": __project__,
    "version": __version__,
    "metaobject_type": "delivery_timeline_rule",
    "description": (
        "Per-collection shipping and delivery day-range estimates, stored as a "
        "single metaobject in the host store and edited through a form."
    ),
}


def get_metadata() -> dict:
    """Return current system metadata as a dict."""
    return CORE_METADATA
