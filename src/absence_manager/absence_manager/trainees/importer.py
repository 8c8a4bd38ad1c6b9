"""Trainee roster import from Excel or CSV exports.

Files come from the school's roster export: three title lines, the header on
row 4 and trainees from row 5 on. Header cells are matched case-insensitively
against French aliases; unknown columns are ignored.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from typing import IO, Union

import pandas as pd

from ..core.constants import ALLOWED_IMPORT_EXTENSIONS
from ..core.exceptions import BadRequestError

HEADER_ROW_INDEX = 3

HEADER_ALIASES = {
    "cef": "cef",
    "nom": "name",
    "prénom": "first_name",
    "prenom": "first_name",
    "groupe": "group_name",
    "class": "group_name",
    "classe": "group_name",
    "telephone": "phone",
    "téléphone": "phone",
    "tel": "phone",
}

REQUIRED_FIELDS = ("cef", "name", "first_name", "group_name")


@dataclass
class ParsedRoster:
    rows: list[dict] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)


def _cell(value) -> str:
    if value is None or pd.isna(value):
        return ""
    text = str(value).strip()
    # Numeric cefs/phones read by Excel come back as "12345.0".
    if text.endswith(".0") and text[:-2].isdigit():
        text = text[:-2]
    return text


def _read_frame(source: Union[str, IO], extension: str) -> pd.DataFrame:
    """Frame whose first row is the header row."""
    if extension == ".csv":
        # Title lines are skipped before parsing; they rarely have as many fields as the header.
        # Cells past the header width have no column name, so they are dropped.
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            return pd.read_csv(
                source,
                header=None,
                dtype=str,
                keep_default_na=False,
                skiprows=HEADER_ROW_INDEX,
                engine="python",
                on_bad_lines=lambda cells: cells,
            )
    engine = "openpyxl" if extension == ".xlsx" else None
    frame = pd.read_excel(source, header=None, dtype=str, engine=engine)
    return frame.iloc[HEADER_ROW_INDEX:].reset_index(drop=True)


def extension_of(filename: str) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in ALLOWED_IMPORT_EXTENSIONS:
        raise BadRequestError("Unsupported file type")
    return ext


def parse_roster(source: Union[str, IO], extension: str) -> ParsedRoster:
    try:
        frame = _read_frame(source, extension)
    except pd.errors.EmptyDataError as e:
        raise BadRequestError("Le fichier ne contient pas assez de lignes") from e
    except pd.errors.ParserError as e:
        raise BadRequestError(f"Fichier illisible: {e}") from e
    if len(frame.index) < 2:
        raise BadRequestError("Le fichier ne contient pas assez de lignes")

    header = [HEADER_ALIASES.get(_cell(h).lower()) for h in frame.iloc[0].tolist()]

    result = ParsedRoster()
    for index in range(1, len(frame.index)):
        values = frame.iloc[index].tolist()
        data: dict[str, str] = {}
        for column, name in enumerate(header):
            if name and column < len(values):
                text = _cell(values[column])
                if text:
                    data[name] = text

        if not data:
            continue
        if any(not data.get(f) for f in REQUIRED_FIELDS):
            # 1-based spreadsheet row number
            result.errors.append({"row": HEADER_ROW_INDEX + index + 1, "error": "Champs obligatoires manquants"})
            continue
        result.rows.append(data)

    return result
