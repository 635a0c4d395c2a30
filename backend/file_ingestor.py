# backend/file_ingestor.py

import csv
import io
import logging
import os
from datetime import date, datetime
from typing import IO, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("txt", "csv", "xlsx", "xls")
EXCEL_ENGINES = {"xlsx": "openpyxl", "xls": "xlrd"}
CSV_DELIMITERS = ",\t;|"
SNIFF_BYTES = 64 * 1024
DATE_FORMAT = "%m/%d/%Y"


class IngestionError(Exception):
    """Base class for upload errors that stop analysis"""


class UnsupportedFileType(IngestionError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__("Unsupported file type. Please use TXT, CSV, or Excel files.")


class ParseFailure(IngestionError):
    def __init__(self, filename: str, cause: Exception):
        self.filename = filename
        self.cause = cause
        super().__init__(f"could not read {filename}: {cause}")


def file_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lstrip(".").lower()


def is_supported(filename: str) -> bool:
    return file_extension(filename) in SUPPORTED_EXTENSIONS


def format_file_size(num_bytes: int) -> str:
    return f"{num_bytes / 1024:.2f} KB"


def sniff_delimiter(text: str) -> str:
    """Comma, tab, semicolon or pipe; comma when the sample is ambiguous"""
    try:
        return csv.Sniffer().sniff(text[:SNIFF_BYTES], delimiters=CSV_DELIMITERS).delimiter
    except csv.Error:
        return ","


def cell_text(value) -> str:
    """Render a spreadsheet cell the way it reads on screen"""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, datetime):
        if (value.hour, value.minute, value.second) == (0, 0, 0):
            return value.strftime(DATE_FORMAT)
        return value.strftime(DATE_FORMAT + " %H:%M:%S")
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    # xlrd hands back every number as a float
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class FileIngestor:
    """Turn an uploaded TXT, CSV or Excel report into one plain-text string"""

    @staticmethod
    def extract_text_from_txt(data: bytes) -> str:
        # utf-8-sig drops a leading BOM, otherwise identical to utf-8
        return data.decode("utf-8-sig")

    @staticmethod
    def extract_text_from_csv(data: bytes) -> str:
        """
        Parse CSV rows and flatten them to text

        Args:
            data: Raw CSV bytes (UTF-8)

        Returns:
            Fields joined by a single space, rows joined by newline
        """
        text = data.decode("utf-8-sig")
        if not text.strip():
            return ""

        delimiter = sniff_delimiter(text)
        # pandas needs the column count up front for ragged rows; quoted
        # fields may span lines, so count fields per parsed row
        width = max((len(row) for row in csv.reader(io.StringIO(text), delimiter=delimiter)), default=1)
        df = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            header=None,
            names=list(range(width)),
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
        ).fillna("")

        rows = []
        for fields in df.itertuples(index=False, name=None):
            fields = list(fields)
            # drop cells that only exist to square off shorter rows
            while fields and fields[-1] == "":
                fields.pop()
            rows.append(" ".join(fields))
        return "\n".join(rows)

    @staticmethod
    def extract_text_from_excel(data: bytes, extension: str = "xlsx") -> str:
        """
        Convert every sheet to comma-separated text, in workbook order

        Args:
            data: Raw workbook bytes
            extension: "xlsx" or "xls", selects the reader engine

        Returns:
            Concatenated CSV text of all sheets
        """
        # object dtype keeps datetimes and ints as the reader produced them
        sheets = pd.read_excel(
            io.BytesIO(data),
            sheet_name=None,
            header=None,
            dtype=object,
            engine=EXCEL_ENGINES[extension],
        )
        text = ""
        for name, df in sheets.items():
            logger.debug("sheet %r: %d rows", name, len(df))
            if df.empty:
                continue
            cells = pd.DataFrame(
                [[cell_text(value) for value in row] for row in df.itertuples(index=False, name=None)]
            )
            # every row, including the last, ends in "\n"
            text += cells.to_csv(index=False, header=False, lineterminator="\n")
        return text

    @classmethod
    def extract_text(cls, filename: str, data: bytes) -> str:
        """Dispatch on the file-name suffix; raises IngestionError"""
        extension = file_extension(filename)
        if extension not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFileType(filename)

        try:
            if extension == "txt":
                return cls.extract_text_from_txt(data)
            if extension == "csv":
                return cls.extract_text_from_csv(data)
            return cls.extract_text_from_excel(data, extension)
        except Exception as e:
            raise ParseFailure(filename, e) from e

    @classmethod
    def extract_text_from_uploaded_file(cls, file_obj: Union[IO[bytes], bytes],
                                        filename: Optional[str] = None) -> str:
        if isinstance(file_obj, (bytes, bytearray)):
            data = bytes(file_obj)
        else:
            filename = filename or getattr(file_obj, "filename", None) or getattr(file_obj, "name", "")
            data = file_obj.read() or b""
        return cls.extract_text(filename or "", data)
