"""
Constants and system prompts for the FDA Chat application.
"""
from enum import Enum


class LabelField(str, Enum):
    """Fields of the openFDA drug label endpoint available for searching and returning."""
    ABUSE = "abuse"
    CONTROLLED_SUBSTANCE = "controlled_substance"
    DEPENDENCE = "dependence"
    DRUG_ABUSE_AND_DEPENDENCE = "drug_abuse_and_dependence"
    OVERDOSAGE = "overdosage"
    ADVERSE_REACTIONS = "adverse_reactions"
    DRUG_AND_OR_LABORATORY_TEST_INTERACTIONS = "drug_and_or_laboratory_test_interactions"
    DRUG_INTERACTIONS = "drug_interactions"
    CLINICAL_PHARMACOLOGY = "clinical_pharmacology"
    MECHANISM_OF_ACTION = "mechanism_of_action"
    PHARMACODYNAMICS = "pharmacodynamics"
    PHARMACOKINETICS = "pharmacokinetics"
    EFFECTIVE_TIME = "effective_time"
    ID = "id"
    SET_ID = "set_id"
    VERSION = "version"
    ACTIVE_INGREDIENT = "active_ingredient"
    CONTRAINDICATIONS = "contraindications"
    DESCRIPTION = "description"
    DOSAGE_AND_ADMINISTRATION = "dosage_and_administration"
    DOSAGE_FORMS_AND_STRENGTHS = "dosage_forms_and_strengths"
    INACTIVE_INGREDIENT = "inactive_ingredient"
    INDICATIONS_AND_USAGE = "indications_and_usage"
    PURPOSE = "purpose"
    SPL_PRODUCT_DATA_ELEMENTS = "spl_product_data_elements"
    ANIMAL_PHARMACOLOGY_AND_OR_TOXICOLOGY = "animal_pharmacology_and_or_toxicology"
    CARCINOGENESIS_AND_MUTAGENESIS_AND_IMPAIRMENT_OF_FERTILITY = "carcinogenesis_and_mutagenesis_and_impairment_of_fertility"
    NONCLINICAL_TOXICOLOGY = "nonclinical_toxicology"
    APPLICATION_NUMBER = "application_number"
    BRAND_NAME = "brand_name"
    GENERIC_NAME = "generic_name"
    MANUFACTURER_NAME = "manufacturer_name"
    NUI = "nui"
    PACKAGE_NDC = "package_ndc"
    PHARM_CLASS_CS = "pharm_class_cs"
    PHARM_CLASS_EPC = "pharm_class_epc"
    PHARM_CLASS_MOA = "pharm_class_moa"
    PHARM_CLASS_PE = "pharm_class_pe"
    PRODUCT_NDC = "product_ndc"
    PRODUCT_TYPE = "product_type"
    ROUTE = "route"
    RXCUI = "rxcui"
    SPL_ID = "spl_id"
    SPL_SET_ID = "spl_set_id"
    SUBSTANCE_NAME = "substance_name"
    UNII = "unii"
    UPC = "upc"
    LABORATORY_TESTS = "laboratory_tests"
    MICROBIOLOGY = "microbiology"
    PACKAGE_LABEL_PRINCIPAL_DISPLAY_PANEL = "package_label_principal_display_panel"
    RECENT_MAJOR_CHANGES = "recent_major_changes"
    SPL_UNCLASSIFIED_SECTION = "spl_unclassified_section"
    ASK_DOCTOR = "ask_doctor"
    ASK_DOCTOR_OR_PHARMACIST = "ask_doctor_or_pharmacist"
    DO_NOT_USE = "do_not_use"
    INFORMATION_FOR_OWNERS_OR_CAREGIVERS = "information_for_owners_or_caregivers"
    INFORMATION_FOR_PATIENTS = "information_for_patients"
    INSTRUCTIONS_FOR_USE = "instructions_for_use"
    KEEP_OUT_OF_REACH_OF_CHILDREN = "keep_out_of_reach_of_children"
    OTHER_SAFETY_INFORMATION = "other_safety_information"
    PATIENT_MEDICATION_INFORMATION = "patient_medication_information"
    QUESTIONS = "questions"
    SPL_MEDGUIDE = "spl_medguide"
    SPL_PATIENT_PACKAGE_INSERT = "spl_patient_package_insert"
    STOP_USE = "stop_use"
    WHEN_USING = "when_using"
    CLINICAL_STUDIES = "clinical_studies"
    REFERENCES = "references"
    GERIATRIC_USE = "geriatric_use"
    LABOR_AND_DELIVERY = "labor_and_delivery"
    NURSING_MOTHERS = "nursing_mothers"
    PEDIATRIC_USE = "pediatric_use"
    PREGNANCY = "pregnancy"
    PREGNANCY_OR_BREAST_FEEDING = "pregnancy_or_breast_feeding"
    TERATOGENIC_EFFECTS = "teratogenic_effects"
    USE_IN_SPECIFIC_POPULATIONS = "use_in_specific_populations"
    HOW_SUPPLIED = "how_supplied"
    SAFE_HANDLING_WARNING = "safe_handling_warning"
    STORAGE_AND_HANDLING = "storage_and_handling"
    BOXED_WARNING = "boxed_warning"
    GENERAL_PRECAUTIONS = "general_precautions"
    PRECAUTIONS = "precautions"
    USER_SAFETY_WARNINGS = "user_safety_warnings"
    WARNINGS = "warnings"


# Harmonized fields, nested under "openfda." in label records
OPENFDA_FIELDS = frozenset({
    LabelField.APPLICATION_NUMBER,
    LabelField.BRAND_NAME,
    LabelField.GENERIC_NAME,
    LabelField.MANUFACTURER_NAME,
    LabelField.NUI,
    LabelField.PACKAGE_NDC,
    LabelField.PHARM_CLASS_CS,
    LabelField.PHARM_CLASS_EPC,
    LabelField.PHARM_CLASS_MOA,
    LabelField.PHARM_CLASS_PE,
    LabelField.PRODUCT_NDC,
    LabelField.PRODUCT_TYPE,
    LabelField.ROUTE,
    LabelField.RXCUI,
    LabelField.SPL_ID,
    LabelField.SPL_SET_ID,
    LabelField.SUBSTANCE_NAME,
    LabelField.UNII,
    LabelField.UPC,
})

OPENFDA_PREFIX = "openfda."

_FIELD_LIST = "\n".join(field.value for field in LabelField)

# System prompt translating a question into an openFDA query
FDA_QUERY_PROMPT = """Translate the user's question into a query for the FDA API, using these examples for reference:

Example Question: "What are the warnings associated with Xarelto?"
JSON: {"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["warnings"], "limit": 10}

Example Question: "What should I do if I overdose on acetaminophen?"
JSON: {"search_params": [{"openfda.generic_name": "acetaminophen"}], "fields_to_return": ["overdosage"], "limit": 10}

Example Question: "Can you provide a description of Xarelto?"
JSON: {"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["description"], "limit": 10}

Example Question: "What are the side effects of Xarelto?"
JSON: {"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["adverse_reactions"], "limit": 10}

Example Question: "How should Xarelto be administered?"
JSON: {"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["dosage_and_administration"], "limit": 10}

Example Question: "Who manufactures Xarelto?"
JSON: {"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["manufacturer_name"], "limit": 10}

Example Question: "Is there any specific information that patients should know about Xarelto?"
JSON: {"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["information_for_patients"], "limit": 10}

Example Question: "Under what conditions should I stop using Xarelto?"
JSON: {"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["questions", "stop_use"], "limit": 10}

Example Question: "What are the contraindications for Eliquis?"
JSON: {"search_params": [{"openfda.brand_name": "eliquis"}], "fields_to_return": ["contraindications"], "limit": 10}

Example Question: "What is the abuse potential for Adderall?"
JSON: {"search_params": [{"openfda.brand_name": "adderall"}], "fields_to_return": ["abuse"], "limit": 10}

Example Question: "What is the abuse potential for Morphine?"
JSON: {"search_params": [{"openfda.generic_name": "morphine"}], "fields_to_return": ["abuse"], "limit": 10}

Example Question: "Indications for Xarelto?"
JSON: {"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["indications_and_usage"], "limit": 10}

Respond with the JSON object only.

The following fields are available for filtering and returning; only use these fields, do not use any other fields:

""" + _FIELD_LIST

# System prompt when answering from the fetched label data
SUMMARY_SYSTEM_PROMPT = """Provide a detailed report to answer the user's question using the following information. Structure the report as follows:
- Summary:
- Key points:
- Details:"""

QUESTION_TEMPLATE = """Question:
{question}"""


# Regular expression patterns
class Patterns:
    """Regular expression patterns for parsing model output and text."""
    JSON_LABEL = r'^\s*JSON:\s*'
    TOKEN_SPLIT = r'\s+|[,.!?;]'
