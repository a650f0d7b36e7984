from __future__ import annotations

import base64
import io
import sys
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

import pytest
from pypdf import PdfReader, PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
    PdfObject,
    TextStringObject,
)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

FF_RADIO = 1 << 15
FF_PUSHBUTTON = 1 << 16
FF_COMBO = 1 << 17
ANNOT_PRINT = 4
ANNOT_HIDDEN = 2


def _rect(values: Sequence[float]) -> ArrayObject:
    return ArrayObject([FloatObject(value) for value in values])


class FormBuilder:
    """Assemble AcroForm PDFs from raw pypdf objects."""

    def __init__(self, pages: int = 1) -> None:
        self.writer = PdfWriter()
        for _ in range(pages):
            self.writer.add_blank_page(width=612, height=792)
        self.font = self.writer._add_object(
            DictionaryObject(
                {
                    NameObject("/Type"): NameObject("/Font"),
                    NameObject("/Subtype"): NameObject("/Type1"),
                    NameObject("/BaseFont"): NameObject("/Helvetica"),
                    NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
                }
            )
        )
        self.fields = ArrayObject()

    # ------------------------------------------------------------------
    def _appearance(self, width: float, height: float, content: bytes = b"") -> IndirectObject:
        stream = DecodedStreamObject()
        stream.update(
            {
                NameObject("/Type"): NameObject("/XObject"),
                NameObject("/Subtype"): NameObject("/Form"),
                NameObject("/BBox"): _rect((0, 0, width, height)),
                NameObject("/Resources"): DictionaryObject(),
            }
        )
        stream.set_data(content)
        return self.writer._add_object(stream)

    def _state_appearances(self, on_state: str, rect: Sequence[float]) -> DictionaryObject:
        width, height = rect[2] - rect[0], rect[3] - rect[1]
        return DictionaryObject(
            {
                NameObject("/N"): DictionaryObject(
                    {
                        NameObject(f"/{on_state}"): self._appearance(width, height, b"0 g 2 2 12 12 re f"),
                        NameObject("/Off"): self._appearance(width, height),
                    }
                )
            }
        )

    def _annotate(self, page: int, ref: IndirectObject) -> None:
        page_obj = self.writer.pages[page]
        if "/Annots" not in page_obj:
            page_obj[NameObject("/Annots")] = ArrayObject()
        page_obj["/Annots"].append(ref)

    def _widget(self, rect: Sequence[float], entries: dict, *, page: int = 0, flags: int = ANNOT_PRINT) -> IndirectObject:
        widget = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Widget"),
                NameObject("/Rect"): _rect(rect),
                NameObject("/F"): NumberObject(flags),
            }
        )
        widget.update(entries)
        ref = self.writer._add_object(widget)
        self._annotate(page, ref)
        return ref

    # ------------------------------------------------------------------
    def text(
        self,
        name: str,
        value: Optional[str] = None,
        *,
        rect: Sequence[float] = (50, 700, 300, 720),
        page: int = 0,
        max_len: Optional[int] = None,
        flags: int = ANNOT_PRINT,
        raw_value: Optional[PdfObject] = None,
    ) -> IndirectObject:
        entries = {
            NameObject("/FT"): NameObject("/Tx"),
            NameObject("/T"): TextStringObject(name),
            NameObject("/DA"): TextStringObject("/Helv 12 Tf 0 g"),
        }
        if value is not None:
            entries[NameObject("/V")] = TextStringObject(value)
        if raw_value is not None:
            entries[NameObject("/V")] = raw_value
        if max_len is not None:
            entries[NameObject("/MaxLen")] = NumberObject(max_len)
        ref = self._widget(rect, entries, page=page, flags=flags)
        self.fields.append(ref)
        return ref

    def checkbox(self, name: str, checked: bool = False, *, rect: Sequence[float] = (50, 650, 66, 666)) -> IndirectObject:
        state = NameObject("/Yes" if checked else "/Off")
        entries = {
            NameObject("/FT"): NameObject("/Btn"),
            NameObject("/T"): TextStringObject(name),
            NameObject("/V"): state,
            NameObject("/AS"): state,
            NameObject("/AP"): self._state_appearances("Yes", rect),
        }
        ref = self._widget(rect, entries)
        self.fields.append(ref)
        return ref

    def radio(self, name: str, options: Iterable[str], selected: Optional[str] = None) -> IndirectObject:
        parent = DictionaryObject(
            {
                NameObject("/FT"): NameObject("/Btn"),
                NameObject("/Ff"): NumberObject(FF_RADIO),
                NameObject("/T"): TextStringObject(name),
                NameObject("/V"): NameObject(f"/{selected}" if selected else "/Off"),
                NameObject("/Kids"): ArrayObject(),
            }
        )
        parent_ref = self.writer._add_object(parent)
        for offset, option in enumerate(options):
            rect = (50 + offset * 30, 600, 66 + offset * 30, 616)
            state = NameObject(f"/{option}" if option == selected else "/Off")
            ref = self._widget(
                rect,
                {
                    NameObject("/Parent"): parent_ref,
                    NameObject("/AS"): state,
                    NameObject("/AP"): self._state_appearances(option, rect),
                },
            )
            parent["/Kids"].append(ref)
        self.fields.append(parent_ref)
        return parent_ref

    def choice(
        self,
        name: str,
        options: Iterable[str],
        selected: Optional[object] = None,
        *,
        combo: bool = True,
    ) -> IndirectObject:
        entries = {
            NameObject("/FT"): NameObject("/Ch"),
            NameObject("/Ff"): NumberObject(FF_COMBO if combo else 0),
            NameObject("/T"): TextStringObject(name),
            NameObject("/Opt"): ArrayObject([TextStringObject(option) for option in options]),
            NameObject("/DA"): TextStringObject("/Helv 10 Tf 0 g"),
        }
        if isinstance(selected, (list, tuple)):
            entries[NameObject("/V")] = ArrayObject([TextStringObject(value) for value in selected])
        elif selected is not None:
            entries[NameObject("/V")] = TextStringObject(selected)
        ref = self._widget((50, 550, 200, 570), entries)
        self.fields.append(ref)
        return ref

    def push_button(self, name: str) -> IndirectObject:
        entries = {
            NameObject("/FT"): NameObject("/Btn"),
            NameObject("/Ff"): NumberObject(FF_PUSHBUTTON),
            NameObject("/T"): TextStringObject(name),
        }
        ref = self._widget((50, 500, 120, 520), entries)
        self.fields.append(ref)
        return ref

    def signature(self, name: str) -> IndirectObject:
        entries = {
            NameObject("/FT"): NameObject("/Sig"),
            NameObject("/T"): TextStringObject(name),
        }
        ref = self._widget((50, 450, 250, 480), entries)
        self.fields.append(ref)
        return ref

    def nested_text(self, parent_name: str, child_name: str, value: str) -> IndirectObject:
        parent = DictionaryObject(
            {
                NameObject("/T"): TextStringObject(parent_name),
                NameObject("/Kids"): ArrayObject(),
            }
        )
        parent_ref = self.writer._add_object(parent)
        child_ref = self._widget(
            (50, 400, 300, 420),
            {
                NameObject("/FT"): NameObject("/Tx"),
                NameObject("/T"): TextStringObject(child_name),
                NameObject("/V"): TextStringObject(value),
                NameObject("/DA"): TextStringObject("/Helv 12 Tf 0 g"),
                NameObject("/Parent"): parent_ref,
            },
        )
        parent["/Kids"].append(child_ref)
        self.fields.append(parent_ref)
        return parent_ref

    def link(self, page: int = 0) -> IndirectObject:
        link = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Link"),
                NameObject("/Rect"): _rect((400, 50, 500, 70)),
                NameObject("/Border"): ArrayObject([NumberObject(0), NumberObject(0), NumberObject(0)]),
            }
        )
        ref = self.writer._add_object(link)
        self._annotate(page, ref)
        return ref

    # ------------------------------------------------------------------
    def build(self, *, with_form: bool = True) -> bytes:
        if with_form:
            self.writer._root_object[NameObject("/AcroForm")] = DictionaryObject(
                {
                    NameObject("/Fields"): self.fields,
                    NameObject("/DR"): DictionaryObject(
                        {
                            NameObject("/Font"): DictionaryObject({NameObject("/Helv"): self.font}),
                        }
                    ),
                    NameObject("/DA"): TextStringObject("/Helv 0 Tf 0 g"),
                }
            )
        buffer = io.BytesIO()
        self.writer.write(buffer)
        return buffer.getvalue()


def encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def make_item(data: bytes, property_name: str = "data", file_name: str = "form.pdf") -> dict:
    return {
        "json": {},
        "binary": {
            property_name: {
                "data": encode(data),
                "mimeType": "application/pdf",
                "fileName": file_name,
                "fileExtension": "pdf",
            }
        },
    }


def flattened_text(data: bytes) -> str:
    """Concatenate the decoded content of every page XObject."""
    reader = PdfReader(io.BytesIO(data))
    chunks = []
    for page in reader.pages:
        resources = page.get("/Resources")
        resources = resources.get_object() if resources is not None else {}
        xobjects = resources.get("/XObject")
        if xobjects is None:
            continue
        for ref in xobjects.get_object().values():
            chunks.append(ref.get_object().get_data().decode("latin-1"))
    return "\n".join(chunks)


@pytest.fixture()
def form_builder() -> Callable[..., FormBuilder]:
    return FormBuilder


@pytest.fixture()
def simple_form_pdf() -> bytes:
    """One empty text field ``Name`` and one unchecked checkbox ``Agree``."""
    builder = FormBuilder()
    builder.text("Name", "")
    builder.checkbox("Agree", checked=False)
    return builder.build()


@pytest.fixture()
def mixed_form_pdf() -> bytes:
    builder = FormBuilder()
    builder.text("Name", "Bob")
    builder.checkbox("Agree", checked=True)
    builder.radio("Color", ["Red", "Blue"], selected="Blue")
    builder.choice("Country", ["France", "Spain"], selected="Spain")
    builder.push_button("Submit")
    builder.signature("Signature")
    builder.choice("Languages", ["en", "fr"], selected=["fr"], combo=False)
    builder.nested_text("address", "city", "Paris")
    return builder.build()


@pytest.fixture()
def plain_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
