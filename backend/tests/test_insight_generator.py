"""
Tests for InsightGenerator: prompt construction, reply cleanup, validation
and the default-insights fallback.
"""

import copy
import json

import pytest

from app.core.llm import ProviderError
from app.services.insights_service import InsightGenerator, default_insights, validate_insights
from conftest import FakeLLM, VALID_INSIGHTS

DEFAULT = {
    "salaryRanges": [],
    "growthRate": 0,
    "demandLevel": "Medium",
    "topSkills": [],
    "marketOutlook": "Neutral",
    "keyTrends": [],
    "recommendedSkills": [],
}


def generate_with_reply(reply, industry="tech-software-development"):
    return InsightGenerator(FakeLLM([reply])).generate(industry)


class TestDefaultInsights:

    def test_default_insights_values(self):
        assert default_insights() == DEFAULT

    def test_default_insights_returns_fresh_objects(self):
        first = default_insights()
        first["topSkills"].append("mutated")
        assert default_insights()["topSkills"] == []


class TestPrompt:

    def test_prompt_embeds_industry_and_requirements(self):
        prompt = InsightGenerator(None).build_prompt("healthcare-nursing")
        assert "healthcare-nursing industry" in prompt
        assert '"salaryRanges"' in prompt
        assert "at least 5 common roles" in prompt
        assert "Return ONLY the JSON" in prompt

    def test_prompt_sent_as_single_user_message(self):
        llm = FakeLLM()
        InsightGenerator(llm).generate("finance-banking")
        assert len(llm.calls) == 1
        (message,) = llm.calls[0]
        assert message["role"] == "user"
        assert "finance-banking" in message["content"]


class TestGenerate:

    def test_plain_json_reply_is_returned(self):
        assert generate_with_reply(json.dumps(VALID_INSIGHTS)) == VALID_INSIGHTS

    @pytest.mark.parametrize("wrapper", [
        "```json\n{}\n```",
        "```\n{}\n```",
        "  ```json{}```  \n",
    ])
    def test_markdown_fences_are_stripped(self, wrapper):
        reply = wrapper.replace("{}", json.dumps(VALID_INSIGHTS))
        assert generate_with_reply(reply) == generate_with_reply(json.dumps(VALID_INSIGHTS))

    def test_invalid_json_returns_default(self):
        assert generate_with_reply("Here are your insights: {growthRate: 5") == DEFAULT

    def test_missing_salary_ranges_returns_default(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        del payload["salaryRanges"]
        assert generate_with_reply(json.dumps(payload)) == DEFAULT

    def test_non_numeric_salary_min_returns_default(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        payload["salaryRanges"][2]["min"] = "85k"
        assert generate_with_reply(json.dumps(payload)) == DEFAULT

    def test_non_numeric_growth_rate_returns_default(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        payload["growthRate"] = "12%"
        assert generate_with_reply(json.dumps(payload)) == DEFAULT

    def test_boolean_growth_rate_is_not_a_number(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        payload["growthRate"] = True
        assert generate_with_reply(json.dumps(payload)) == DEFAULT

    def test_unknown_demand_level_returns_default(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        payload["demandLevel"] = "Very High"
        assert generate_with_reply(json.dumps(payload)) == DEFAULT

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity", "1e999"])
    def test_non_finite_growth_rate_returns_default(self, constant):
        reply = json.dumps(VALID_INSIGHTS).replace('"growthRate": 12.5', f'"growthRate": {constant}')
        assert constant in reply
        assert generate_with_reply(reply) == DEFAULT

    def test_non_finite_salary_returns_default(self):
        reply = json.dumps(VALID_INSIGHTS).replace('"median": 120000', '"median": Infinity')
        assert generate_with_reply(reply) == DEFAULT

    @pytest.mark.parametrize("field", ["topSkills", "keyTrends", "recommendedSkills"])
    def test_non_string_list_item_returns_default(self, field):
        payload = copy.deepcopy(VALID_INSIGHTS)
        payload[field] = ["Python", 5]
        assert generate_with_reply(json.dumps(payload)) == DEFAULT

    def test_non_string_location_returns_default(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        payload["salaryRanges"][0]["location"] = {"country": "US"}
        assert generate_with_reply(json.dumps(payload)) == DEFAULT

    def test_json_array_reply_returns_default(self):
        assert generate_with_reply(json.dumps([VALID_INSIGHTS])) == DEFAULT

    def test_unknown_fields_are_dropped(self):
        payload = dict(VALID_INSIGHTS, notes="extra commentary")
        result = generate_with_reply(json.dumps(payload))
        assert "notes" not in result
        assert result == VALID_INSIGHTS

    def test_provider_error_returns_default(self):
        llm = FakeLLM(error=ProviderError("gemini call failed: quota exceeded"))
        assert InsightGenerator(llm).generate("retail") == DEFAULT

    def test_unexpected_error_returns_default(self):
        llm = FakeLLM(error=ConnectionResetError("connection reset"))
        assert InsightGenerator(llm).generate("retail") == DEFAULT

    def test_missing_llm_returns_default(self):
        assert InsightGenerator(None).generate("retail") == DEFAULT

    @pytest.mark.parametrize("reply", ["", "null", "42", "```", "{\"growthRate\": 1}", None])
    def test_never_raises_and_always_has_all_fields(self, reply):
        result = InsightGenerator(FakeLLM([reply])).generate("any industry")
        assert set(result) == set(DEFAULT)
        assert isinstance(result["growthRate"], (int, float))
        assert isinstance(result["demandLevel"], str)
        assert isinstance(result["marketOutlook"], str)
        for field in ("salaryRanges", "topSkills", "keyTrends", "recommendedSkills"):
            assert isinstance(result[field], list)


class TestValidateInsights:

    def test_valid_payload(self):
        assert validate_insights(VALID_INSIGHTS) is None

    def test_salary_range_without_role(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        del payload["salaryRanges"][0]["role"]
        assert "role" in validate_insights(payload)

    def test_key_trends_not_a_list(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        payload["keyTrends"] = "AI"
        assert "keyTrends" in validate_insights(payload)

    def test_location_is_optional(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        del payload["salaryRanges"][0]["location"]
        assert validate_insights(payload) is None

    def test_non_string_skill(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        payload["topSkills"] = ["Python", None]
        assert "topSkills" in validate_insights(payload)

    def test_non_finite_number(self):
        payload = copy.deepcopy(VALID_INSIGHTS)
        payload["growthRate"] = float("nan")
        assert "growthRate" in validate_insights(payload)
