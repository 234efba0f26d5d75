"""Project-wide constants."""

import re
from pathlib import Path

# -- Keyword hierarchy --------------------------------------------------------
DEFAULT_KEYWORD_MAPPINGS_PATH: Path = (
    Path(__file__).parent / "data" / "keyword_mappings.json"
)

# Top-level keys of the hierarchy resource, per study type value.
STUDY_TYPE_KEYS: dict[str, str] = {
    "animal": "animalStudies",
    "human": "humanStudies",
}

MAX_CATEGORY_DEPTH: int = 3
CATEGORY_PATH_SEPARATOR: str = "."
FULL_PATH_SEPARATOR: str = " > "

# Trailing PubMed field tag on a term, e.g. "Absorption[MeSH]" or "Cmax [tiab]".
TERM_TAG_PATTERN: re.Pattern[str] = re.compile(r"\s*\[[^\[\]]*\]\s*$")

# -- Primary search keywords -------------------------------------------------
PRIMARY_KEYWORD_CAP_BROAD: int = 8
PRIMARY_KEYWORD_CAP_NARROW: int = 3
PRIMARY_KEYWORD_MESH_SHARE: float = 0.6
PRIMARY_MESH_STOPLIST: frozenset[str] = frozenset(
    {"efficacy", "treatment outcome", "drug therapy"}
)
PRIMARY_TEXT_STOPLIST_NARROW: frozenset[str] = frozenset(
    {"efficacy", "safety", "pharmacokinetics"}
)
PRIMARY_TEXT_MIN_LENGTH_BROAD: int = 3  # strictly greater than
PRIMARY_TEXT_MIN_LENGTH_NARROW: int = 5  # strictly greater than

# -- Full-path title variants ------------------------------------------------
FULL_PATH_TITLE_SEPARATORS: tuple[str, ...] = (" > ", ": ", " - ", " ")

# -- Study-type classification -----------------------------------------------
ANIMAL_TERMS: tuple[str, ...] = (
    "rat", "rats", "rattus", "mouse", "mice", "murine", "mus musculus",
    "rabbit", "rabbits", "oryctolagus", "dog", "dogs", "canine", "canis",
    "cat", "cats", "feline", "felis", "pig", "pigs", "porcine", "swine",
    "sus scrofa", "monkey", "monkeys", "primate", "primates", "macaque",
    "rhesus", "guinea pig", "guinea pigs", "cavia porcellus", "hamster",
    "hamsters", "animal model", "animal models", "animal study",
    "animal studies", "in vivo", "rodent", "rodents", "bovine", "cattle",
    "cow", "cows", "ovine", "sheep", "equine", "horse", "horses", "goat",
    "goats", "xenograft", "transgenic", "knockout mice", "wild-type",
    "sprague-dawley", "wistar rat", "balb/c", "c57bl", "nude mice",
)

# Species names that, in a title, count as a strong animal signal.
STRONG_ANIMAL_TERMS: tuple[str, ...] = ANIMAL_TERMS[:10]

HUMAN_TERMS: tuple[str, ...] = (
    "human", "humans", "homo sapiens", "patient", "patients", "subject",
    "subjects", "participant", "participants", "volunteer", "volunteers",
    "clinical trial", "clinical trials", "clinical study", "clinical studies",
    "randomized controlled trial", "man", "woman", "men", "women", "male",
    "female", "males", "females", "adult", "adults", "child", "children",
    "pediatric", "paediatric", "infant", "infants", "neonate", "neonates",
    "elderly", "geriatric", "adolescent", "adolescents", "teenager",
    "teenagers", "phase i", "phase ii", "phase iii", "phase iv",
    "double-blind", "single-blind", "placebo-controlled", "cohort study",
    "case-control", "cross-sectional",
)

ANIMAL_MESH_TERMS: tuple[str, ...] = (
    "animals", "rats", "mice", "rabbits", "dogs", "cats", "swine",
    "disease models, animal", "models, animal",
)

HUMAN_MESH_TERMS: tuple[str, ...] = (
    "humans", "adult", "male", "female", "aged", "middle aged",
    "young adult", "child", "infant", "adolescent",
)

# Phrases in a title that make an article an animal study outright.
ANIMAL_MODEL_TITLE_PHRASES: tuple[str, ...] = (
    " in rats", " in mice", " in pigs", " in rabbits",
    "rat model", "mouse model", "animal model",
)

# Phrases in a title that make an article a clinical study outright.
CLINICAL_TITLE_PHRASES: tuple[str, ...] = (
    "clinical trial",
    "randomized controlled trial",
)

# -- PubMed query building ---------------------------------------------------
STUDY_TYPE_MESH_FILTERS: dict[str, str] = {
    "animal": "Animals[MeSH Terms]",
    "human": "Humans[MeSH Terms]",
}
CONTROLLED_TRIAL_PATH_MARKERS: tuple[str, ...] = (
    "activeControlled",
    "randomized",
    "placebo",
)
META_ANALYSIS_PATH_MARKERS: tuple[str, ...] = ("metaAnalysis",)
UNCONTROLLED_PATH_MARKERS: tuple[str, ...] = ("uncontrolled",)
EARLIEST_PUBLICATION_YEAR: int = 1900
# Category keywords OR-ed into the query, taken from the front of the list.
QUERY_KEYWORD_LIMIT: int = 3
