"""Static lookup tables for the composition factors.

Column ids follow the tract_race_ethnicity schema: a level-0 root letter
(H, W, B, A, ...), a level-1 regional group (HMex, AEA, ...) and level-2
specific ancestries (AEAKrn, HCHCuban, ...). Every non-root column names
exactly one parent whose value aggregates its children.

These tables are loaded once per process and shared read-only.
"""

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class Bracket:
    key: str
    min: float
    max: float

    def overlaps(self, low: float, high: float) -> bool:
        return low <= self.max and high >= self.min


def _children(parent: str, *suffixes: str) -> dict[str, str]:
    return {f"{parent}{suffix}": parent for suffix in suffixes}


_PARENTS: dict[str, str] = {}

# Hispanic
_PARENTS |= _children("H", "Mex", "CA", "SA", "CH", "Oth")
_PARENTS |= _children("HCA", "CstRcn", "Gutmln", "Hndrn", "Ncrgn", "Pnmn", "Slvdrn")
_PARENTS |= _children("HSA", "Argntn", "Blvn", "Chln", "Clmbn", "Ecudrn", "Prguyn", "Prvn", "Urgyn", "Vnzuln")
_PARENTS |= _children("HCH", "PrtRcn", "Cuban", "Dmncn")

# White
_PARENTS |= _children("W", "Eur", "MENA", "Oth")
_PARENTS |= _children(
    "WEur", "Itln", "Irsh", "Grmn", "Plsh", "Rsn", "Frnch", "Brtsh", "Englsh",
    "Sctsh", "Grk", "Prtgs", "Dtch", "Swdsh", "Nrwgn", "Trksh", "Armn",
)
_PARENTS |= _children("WMENA", "Arab", "Lbns", "Plstn", "Syrn", "Egptn", "Irq", "Irn", "Isrl")

# Black
_PARENTS |= _children("B", "AfrAm", "SSAf", "Crb", "Oth")
_PARENTS |= _children("BSSAf", "Ngrn", "Ghn", "Ethpn", "Knyn", "SAfr")
_PARENTS |= _children("BCrb", "Jmcn", "Htn", "Brbdn", "TrTob")

# Asian
_PARENTS |= _children("A", "EA", "SA", "SEA", "CA", "Oth")
_PARENTS |= _children("AEA", "Krn", "ChnsNoT", "Jpns", "Twns")
_PARENTS |= _children("ASA", "AsnInd", "Pkstn", "Bngldsh", "SrLnkn", "Npls")
_PARENTS |= _children("ASEA", "Flpn", "Vtnms", "Thai", "Cmbdn", "Indnsn", "Mlysn", "Brms", "Sngprn")
_PARENTS |= _children("ACA", "Afghan", "Kazakh", "Kyrgyz", "Tajik", "Uzbek")

# American Indian / Alaska Native, Pacific Islander, other
_PARENTS |= {"AIANAIn": "AIANA", "AIANAlkNtv": "AIANA"}
_PARENTS |= _children("NHPI", "Ply", "Mc")
_PARENTS |= _children("NHPIPly", "NH", "Smn")
_PARENTS |= _children("NHPIMc", "Chmr")
_PARENTS |= _children("SOR", "Brzln", "Blzn", "Guyans")

ETHNICITY_PARENTS = MappingProxyType(_PARENTS)

ETHNICITY_ROOTS: tuple[str, ...] = ("H", "W", "B", "A", "AIANA", "NHPI", "SOR")

# Human-readable names. Broad groups map to their level-1 columns; the
# resolver collapses those back onto the shared root to avoid double counting.
_HISPANIC = ("HMex", "HCA", "HSA", "HCH", "HOth")

ETHNICITY_NAMES = MappingProxyType({
    # Asian
    "asian": ("AEA", "ASA", "ASEA", "ACA", "AOth"),
    "east_asian": ("AEA",),
    "south_asian": ("ASA",),
    "southeast_asian": ("ASEA",),
    "central_asian": ("ACA",),
    "korean": ("AEAKrn",),
    "chinese": ("AEAChnsNoT",),
    "japanese": ("AEAJpns",),
    "taiwanese": ("AEATwns",),
    "filipino": ("ASEAFlpn",),
    "vietnamese": ("ASEAVtnms",),
    "thai": ("ASEAThai",),
    "cambodian": ("ASEACmbdn",),
    "indonesian": ("ASEAIndnsn",),
    "malaysian": ("ASEAMlysn",),
    "burmese": ("ASEABrms",),
    "singaporean": ("ASEASngprn",),
    "indian": ("ASAAsnInd",),
    "pakistani": ("ASAPkstn",),
    "bangladeshi": ("ASABngldsh",),
    "sri_lankan": ("ASASrLnkn",),
    "nepalese": ("ASANpls",),
    "afghan": ("ACAAfghan",),
    "uzbek": ("ACAUzbek",),
    # Hispanic
    "hispanic": _HISPANIC,
    "latino": _HISPANIC,
    "latinx": _HISPANIC,
    "mexican": ("HMex",),
    "central_american": ("HCA",),
    "south_american": ("HSA",),
    "caribbean_hispanic": ("HCH",),
    "puerto_rican": ("HCHPrtRcn",),
    "cuban": ("HCHCuban",),
    "dominican": ("HCHDmncn",),
    "costa_rican": ("HCACstRcn",),
    "guatemalan": ("HCAGutmln",),
    "honduran": ("HCAHndrn",),
    "nicaraguan": ("HCANcrgn",),
    "salvadoran": ("HCASlvdrn",),
    "argentinean": ("HSAArgntn",),
    "bolivian": ("HSABlvn",),
    "chilean": ("HSAChln",),
    "colombian": ("HSAClmbn",),
    "ecuadorian": ("HSAEcudrn",),
    "peruvian": ("HSAPrvn",),
    "venezuelan": ("HSAVnzuln",),
    # White
    "white": ("WEur", "WMENA", "WOth"),
    "european": ("WEur",),
    "middle_eastern": ("WMENA",),
    "north_african": ("WMENA",),
    "italian": ("WEurItln",),
    "irish": ("WEurIrsh",),
    "german": ("WEurGrmn",),
    "polish": ("WEurPlsh",),
    "russian": ("WEurRsn",),
    "french": ("WEurFrnch",),
    "british": ("WEurBrtsh",),
    "english": ("WEurEnglsh",),
    "scottish": ("WEurSctsh",),
    "greek": ("WEurGrk",),
    "portuguese": ("WEurPrtgs",),
    "dutch": ("WEurDtch",),
    "swedish": ("WEurSwdsh",),
    "norwegian": ("WEurNrwgn",),
    "turkish": ("WEurTrksh",),
    "armenian": ("WEurArmn",),
    "arab": ("WMENAArab",),
    "lebanese": ("WMENALbns",),
    "palestinian": ("WMENAPlstn",),
    "syrian": ("WMENASyrn",),
    "egyptian": ("WMENAEgptn",),
    "iraqi": ("WMENAIrq",),
    "iranian": ("WMENAIrn",),
    "israeli": ("WMENAIsrl",),
    # Black
    "black": ("BAfrAm", "BSSAf", "BCrb", "BOth"),
    "african_american": ("BAfrAm",),
    "sub_saharan_african": ("BSSAf",),
    "caribbean_black": ("BCrb",),
    "nigerian": ("BSSAfNgrn",),
    "ghanaian": ("BSSAfGhn",),
    "ethiopian": ("BSSAfEthpn",),
    "kenyan": ("BSSAfKnyn",),
    "south_african": ("BSSAfSAfr",),
    "jamaican": ("BCrbJmcn",),
    "haitian": ("BCrbHtn",),
    "barbadian": ("BCrbBrbdn",),
    "trinidadian": ("BCrbTrTob",),
    # Other
    "native_american": ("AIANA",),
    "american_indian": ("AIANAIn",),
    "alaska_native": ("AIANAlkNtv",),
    "pacific_islander": ("NHPI",),
    "native_hawaiian": ("NHPIPlyNH",),
    "samoan": ("NHPIPlySmn",),
    "some_other_race": ("SOR",),
    "brazilian": ("SORBrzln",),
    "belizean": ("SORBlzn",),
    "guyanese": ("SORGuyans",),
})

# Five-year age bins (values are already % of total population)
AGE_BRACKETS: tuple[Bracket, ...] = (
    Bracket("Under 5 years (%)", 0, 4),
    Bracket("5 to 9 years (%)", 5, 9),
    Bracket("10 to 14 years (%)", 10, 14),
    Bracket("15 to 19 years (%)", 15, 19),
    Bracket("20 to 24 years (%)", 20, 24),
    Bracket("25 to 29 years (%)", 25, 29),
    Bracket("30 to 34 years (%)", 30, 34),
    Bracket("35 to 39 years (%)", 35, 39),
    Bracket("40 to 44 years (%)", 40, 44),
    Bracket("45 to 49 years (%)", 45, 49),
    Bracket("50 to 54 years (%)", 50, 54),
    Bracket("55 to 59 years (%)", 55, 59),
    Bracket("60 to 64 years (%)", 60, 64),
    Bracket("65 to 69 years (%)", 65, 69),
    Bracket("70 to 74 years (%)", 70, 74),
    Bracket("75 to 79 years (%)", 75, 79),
    Bracket("80 to 84 years (%)", 80, 84),
    Bracket("85 years and over (%)", 85, 120),
)

# Household counts per ACS income bracket
INCOME_BRACKETS: tuple[Bracket, ...] = (
    Bracket("HHIU10E", 0, 9_999),
    Bracket("HHI10t14E", 10_000, 14_999),
    Bracket("HHI15t24E", 15_000, 24_999),
    Bracket("HHI25t34E", 25_000, 34_999),
    Bracket("HHI35t49E", 35_000, 49_999),
    Bracket("HHI50t74E", 50_000, 74_999),
    Bracket("HHI75t99E", 75_000, 99_999),
    Bracket("HI100t149E", 100_000, 149_999),
    Bracket("HI150t199E", 150_000, 199_999),
    Bracket("HHI200plE", 200_000, 999_999),
)

# Source column names
ETHNICITY_TOTAL_KEY = "total_population"
DEMOGRAPHICS_TOTAL_KEY = "Total population"
DEMOGRAPHICS_LABEL_KEY = "NTA2020_1"
MALE_PCT_KEY = "Male (%)"
FEMALE_PCT_KEY = "Female (%)"

GENDER_COLUMNS = MappingProxyType({
    "male": MALE_PCT_KEY,
    "female": FEMALE_PCT_KEY,
})

DEFAULT_AGE_RANGE: tuple[float, float] = (0, 100)
DEFAULT_INCOME_RANGE: tuple[float, float] = (0, 250_000)
