"""
Bibliographic item metadata, as handed over by the host reference manager.

The host (Zotero) owns its item object model; it gives us an ItemMetadata with
the fields tasks are built from. build_tokens() turns one into the token table
used by the task and note templates.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

PDF_CONTENT_TYPE = "application/pdf"

# Item types that never get a task of their own
SKIPPED_ITEM_TYPES = frozenset({"attachment", "note"})


@dataclass
class Creator:
    first_name: str = ""
    last_name: str = ""
    creator_type: str = "author"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Attachment:
    key: str
    content_type: str = ""
    path: str = ""


@dataclass
class ItemMetadata:
    """
    One library item.

    library_path is "library" for the personal library and "groups/<id>" for a
    group library; it is used to build zotero:// links.
    """

    key: str
    item_type: str = "journalArticle"
    title: Optional[str] = None
    abstract: Optional[str] = None
    url: Optional[str] = None
    doi: Optional[str] = None
    creators: list[Creator] = field(default_factory=list)
    primary_creator_type: str = "author"
    collections: list[str] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)
    library_path: str = "library"
    citekey: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ItemMetadata":
        """Build from a plain dict (exported JSON, action parameters)."""
        if not isinstance(data, dict):
            raise TypeError(
                f"Item metadata must be an object, got {type(data).__name__}"
            )
        if not data.get("key"):
            raise ValueError("Item metadata needs a 'key'")

        creators = [
            c if isinstance(c, Creator) else Creator(**c)
            for c in data.get("creators", [])
        ]
        attachments = [
            a if isinstance(a, Attachment) else Attachment(**a)
            for a in data.get("attachments", [])
        ]
        return cls(
            key=data["key"],
            item_type=data.get("item_type", "journalArticle"),
            title=data.get("title"),
            abstract=data.get("abstract"),
            url=data.get("url"),
            doi=data.get("doi"),
            creators=creators,
            primary_creator_type=data.get("primary_creator_type", "author"),
            collections=list(data.get("collections", [])),
            attachments=attachments,
            library_path=data.get("library_path") or "library",
            citekey=data.get("citekey"),
        )

    @property
    def is_regular(self) -> bool:
        """False for attachments and notes."""
        return self.item_type not in SKIPPED_ITEM_TYPES

    def first_pdf(self) -> Optional[Attachment]:
        return next(
            (a for a in self.attachments if a.content_type == PDF_CONTENT_TYPE), None
        )

    def author_names(self) -> list[str]:
        return [
            c.full_name
            for c in self.creators
            if c.creator_type == self.primary_creator_type
        ]


def build_tokens(item: ItemMetadata) -> dict[str, Any]:
    """
    Build the template token table for an item.

    Missing values are empty strings, so they count as undefined in ?..?/!..!
    blocks. An item without a PDF gets empty pdf_path, pdf_id and open_uri.
    """
    pdf = item.first_pdf()
    pdf_path = pdf.path if pdf else ""
    pdf_id = pdf.key if pdf else ""

    author_names = item.author_names()
    et_al = f"{author_names[0]} et al." if author_names else ""

    select_uri = f"zotero://select/{item.library_path}/items/{item.key}"
    open_uri = ""
    if pdf:
        open_uri = f"zotero://open-pdf/{item.library_path}/items/{pdf_id}"

    return {
        "title": item.title or "",
        "abstract": item.abstract or "",
        "url": item.url or "",
        "doi": item.doi or "",
        "pdf_path": pdf_path,
        "pdf_id": pdf_id,
        "et_al": et_al,
        "authors": ", ".join(author_names),
        "library_path": item.library_path,
        "item_id": item.key,
        "select_uri": select_uri,
        "open_uri": open_uri,
        "citekey": item.citekey or "",
    }
