import io
from pathlib import Path

import pandas as pd
import pytest

DATA_DIR = Path(__file__).parent / "data"

SAMPLE_REPORT = (
    "Patient Name: Jane Doe\n"
    "Age: 47\n"
    "Gender: Female\n"
    "Date: 04/02/1990\n"
    "Findings: history of diabetes and hypertension. Diabetes poorly controlled.\n"
    "Lifestyle: smoking, sedentary lifestyle\n"
)


@pytest.fixture
def sample_report():
    return SAMPLE_REPORT


def make_xlsx(sheets):
    """Build workbook bytes from {sheet name: list of rows}"""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, index=False, header=False)
    return buf.getvalue()


@pytest.fixture
def xlsx_factory():
    return make_xlsx


@pytest.fixture
def xls_bytes():
    """Legacy BIFF workbook: Sheet1 = lorem, ipsum; Sheet2 = dolor, sit"""
    return (DATA_DIR / "two_sheets.xls").read_bytes()
