"""
Enumerations shared by profiles and scheme criteria
"""
from enum import Enum


class State(str, Enum):
    """Indian states and union territories by two-letter code"""

    # States
    AP = "AP"  # Andhra Pradesh
    AR = "AR"  # Arunachal Pradesh
    AS = "AS"  # Assam
    BR = "BR"  # Bihar
    CG = "CG"  # Chhattisgarh
    GA = "GA"  # Goa
    GJ = "GJ"  # Gujarat
    HR = "HR"  # Haryana
    HP = "HP"  # Himachal Pradesh
    JH = "JH"  # Jharkhand
    KA = "KA"  # Karnataka
    KL = "KL"  # Kerala
    MP = "MP"  # Madhya Pradesh
    MH = "MH"  # Maharashtra
    MN = "MN"  # Manipur
    ML = "ML"  # Meghalaya
    MZ = "MZ"  # Mizoram
    NL = "NL"  # Nagaland
    OD = "OD"  # Odisha
    PB = "PB"  # Punjab
    RJ = "RJ"  # Rajasthan
    SK = "SK"  # Sikkim
    TN = "TN"  # Tamil Nadu
    TG = "TG"  # Telangana
    TR = "TR"  # Tripura
    UP = "UP"  # Uttar Pradesh
    UK = "UK"  # Uttarakhand
    WB = "WB"  # West Bengal

    # Union territories
    AN = "AN"  # Andaman and Nicobar Islands
    CH = "CH"  # Chandigarh
    DH = "DH"  # Dadra and Nagar Haveli and Daman and Diu
    DL = "DL"  # Delhi
    JK = "JK"  # Jammu and Kashmir
    LA = "LA"  # Ladakh
    LD = "LD"  # Lakshadweep
    PY = "PY"  # Puducherry

    @property
    def is_union_territory(self) -> bool:
        return self in UNION_TERRITORIES


UNION_TERRITORIES = frozenset({
    State.AN, State.CH, State.DH, State.DL,
    State.JK, State.LA, State.LD, State.PY,
})


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value):
        # Accept "male", "FEMALE" and friends
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


class IncomeBracket(str, Enum):
    """Annual household income bands, lowest first"""

    BELOW_1_LAKH = "BELOW_1_LAKH"
    LAKH_1_TO_3 = "1_TO_3_LAKH"
    LAKH_3_TO_5 = "3_TO_5_LAKH"
    LAKH_5_TO_10 = "5_TO_10_LAKH"
    ABOVE_10_LAKH = "ABOVE_10_LAKH"

    @property
    def rank(self) -> int:
        return list(IncomeBracket).index(self)


class SchemeLevel(str, Enum):
    CENTRAL = "central"
    STATE = "state"
