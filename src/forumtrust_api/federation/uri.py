"""Record URIs of the form ``at://{did}/{collection}/{rkey}``."""

from dataclasses import dataclass

SCHEME = "at://"


@dataclass(frozen=True, slots=True)
class RecordUri:
    did: str
    collection: str
    rkey: str

    def __str__(self) -> str:
        return f"{SCHEME}{self.did}/{self.collection}/{self.rkey}"


def parse_record_uri(uri: str) -> RecordUri | None:
    """Split a record URI into its parts, or ``None`` if it is malformed."""
    if not uri.startswith(SCHEME):
        return None

    parts = uri[len(SCHEME) :].split("/")
    if len(parts) != 3 or not all(parts):
        return None

    did, collection, rkey = parts
    if not did.startswith("did:"):
        return None

    return RecordUri(did=did, collection=collection, rkey=rkey)
