import pytest

from models.chat_models import StructuredSearch, validate_search_field
from services.query_translator import QueryTranslator, parse_structured_search, strip_json_label
from utils.constants import FDA_QUERY_PROMPT, LabelField
from utils.errors import QueryTranslationError


@pytest.mark.parametrize("raw, expected", [
    ('JSON: {"limit": 10}', '{"limit": 10}'),
    ('{"limit": 10}', '{"limit": 10}'),
    ('  JSON:{"limit": 10}\n', '{"limit": 10}'),
    ('```json\n{"limit": 10}\n```', '{"limit": 10}'),
])
def test_strip_json_label_removes_label_and_fences(raw, expected):
    """Given labelled or fenced model output, strip_json_label should leave only the object."""
    assert strip_json_label(raw) == expected

def test_parse_structured_search_reads_translator_shape():
    """Given the translator's JSON shape, parsing should produce constraints, fields and limit."""
    search = parse_structured_search(
        'JSON: {"search_params": [{"openfda.brand_name": "xarelto"}], '
        '"fields_to_return": ["questions", "stop_use"], "limit": 10}'
    )

    assert [(c.field, c.term) for c in search.constraints] == [("openfda.brand_name", "xarelto")]
    assert search.fields_to_return == [LabelField.QUESTIONS, LabelField.STOP_USE]
    assert search.field_names == ["questions", "stop_use"]
    assert search.limit == 10

def test_parse_structured_search_flattens_multiple_constraints():
    """Given several dicts and multi-key dicts, every pair should become one ANDed constraint."""
    search = parse_structured_search(
        '{"search_params": [{"openfda.brand_name": "xarelto", "openfda.route": "oral"}, '
        '{"effective_time": 20230915}], "fields_to_return": ["warnings"]}'
    )

    assert [(c.field, c.term) for c in search.constraints] == [
        ("openfda.brand_name", "xarelto"),
        ("openfda.route", "oral"),
        ("effective_time", "20230915"),
    ]

def test_parse_structured_search_defaults_limit():
    """Given no limit, parsing should fall back to 20 records."""
    search = parse_structured_search('{"search_params": [{"openfda.generic_name": "morphine"}], "fields_to_return": ["abuse"]}')
    assert search.limit == 20

@pytest.mark.parametrize("raw", [
    "The warnings for Xarelto include bleeding.",
    "JSON: {not json}",
    "",
    "[1, 2, 3]",
])
def test_parse_structured_search_rejects_non_object_output(raw):
    """Given output that is not a JSON object, parsing should raise QueryTranslationError."""
    with pytest.raises(QueryTranslationError) as exc_info:
        parse_structured_search(raw)
    assert exc_info.value.raw_output == raw

@pytest.mark.parametrize("raw", [
    '{"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["side_effects"]}',
    '{"search_params": [{"brandname": "xarelto"}], "fields_to_return": ["warnings"]}',
    '{"search_params": [{"openfda.warnings": "bleeding"}], "fields_to_return": ["warnings"]}',
    '{"search_params": [], "fields_to_return": ["warnings"]}',
    '{"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": []}',
    '{"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["warnings"], "limit": 0}',
    '{"search_params": [{"openfda.brand_name": "xarelto"}], "fields_to_return": ["warnings"], "limit": 5000}',
    '{"search_params": ["xarelto"], "fields_to_return": ["warnings"]}',
])
def test_parse_structured_search_rejects_fields_outside_vocabulary(raw):
    """Given unknown fields, empty lists or an out of range limit, parsing should raise QueryTranslationError."""
    with pytest.raises(QueryTranslationError):
        parse_structured_search(raw)

@pytest.mark.parametrize("field", ["warnings", "openfda.brand_name", "openfda.pharm_class_epc", "brand_name"])
def test_validate_search_field_accepts_vocabulary(field):
    """Given a vocabulary field, validation should return it unchanged."""
    assert validate_search_field(field) == field

def test_structured_search_accepts_single_search_dict():
    """Given search_params as one object instead of a list, the pairs should still be read."""
    search = StructuredSearch.from_model_output({
        "search_params": {"openfda.brand_name": "eliquis"},
        "fields_to_return": ["contraindications"],
        "limit": 3
    })
    assert search.constraints[0].term == "eliquis"
    assert search.limit == 3

def test_build_messages_puts_instructions_before_question():
    """Given a question, build_messages should send the fixed prompt then the question."""
    messages = QueryTranslator.build_messages("Who manufactures Xarelto?")

    assert messages == [
        {"role": "system", "content": FDA_QUERY_PROMPT},
        {"role": "user", "content": "Who manufactures Xarelto?"}
    ]
    for field in LabelField:
        assert f"\n{field.value}" in FDA_QUERY_PROMPT

@pytest.mark.anyio
async def test_translate_asks_model_for_json_about_latest_message(chat_context, fake_llm):
    """Given a context, translate should ask for deterministic JSON about the latest question."""
    search = await QueryTranslator.translate(chat_context)

    assert search.field_names == ["warnings"]
    assert chat_context.call_count == 1

    call = fake_llm.call_history[0]
    assert call["kind"] == "complete"
    assert call["json_mode"] is True
    assert call["temperature"] == 0.0
    assert call["messages"][-1]["content"] == "What are the warnings associated with Xarelto?"

@pytest.mark.anyio
async def test_translate_propagates_invalid_output(chat_context, fake_llm):
    """Given prose instead of JSON, translate should raise QueryTranslationError."""
    fake_llm.completions = ["I cannot help with that."]

    with pytest.raises(QueryTranslationError):
        await QueryTranslator.translate(chat_context)
