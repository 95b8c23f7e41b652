"""
Shared fixtures for the Identity Bound Accounts tests.
"""
import pytest


@pytest.fixture
def manual_doc():
    """Minimal manual input of a German ID card."""
    return {
        "docNum": "L01X00T47",
        "names": "ERIKA",
        "surname": "MUSTERMANN",
        "birthDate": "12081983",
    }


@pytest.fixture
def type1_rows():
    """MRZ of an ICAO 9303 Type 1 document (3 x 30)."""
    return {
        "row1": "IDD<<T220001293<<<<<<<<<<<<<<<",
        "row2": "6408125<2010315D<<<<<<<<<<<<<4",
        "row3": "MUSTERMANN<<ERIKA<<<<<<<<<<<<<",
    }


@pytest.fixture
def type3_rows():
    """MRZ of an ICAO 9303 Type 3 document (2 x 44)."""
    return {
        "row1": "P<D<<MUSTERMANN<<ERIKA<<<<<<<<<<<<<<<<<<<<<<",
        "row2": "C01X00T478D<<6408125F2702283<<<<<<<<<<<<<<<4",
    }
