"""
Tests for the OpenAI route generator (route_generator.py)

Tests cover:
- Prompt construction
- Request parameters (web search grounding)
- Citation extraction
- Transport error mapping
"""

import pytest
from unittest.mock import Mock
from openai import APIError, RateLimitError

from models import GeneratorOutput, GroundingChunk
from route_errors import TransportFailure
from route_generator import (
    OpenAIRouteGenerator,
    build_route_prompt,
    chunk_for_url,
    is_map_url,
)


def make_completion(content, urls=()):
    annotations = [
        Mock(type="url_citation", url_citation=Mock(url=url))
        for url in urls
    ]
    message = Mock(content=content, annotations=annotations)
    return Mock(choices=[Mock(message=message)])


@pytest.fixture
def openai_client():
    return Mock()


@pytest.fixture
def generator(openai_client):
    return OpenAIRouteGenerator(openai_client=openai_client, model="test-search-model")


class TestPrompt:

    def test_prompt_embeds_query(self):
        prompt = build_route_prompt("  Lagankhel to Budhanilkantha ")
        assert '"Lagankhel to Budhanilkantha"' in prompt

    def test_prompt_requests_json_and_stops(self):
        prompt = build_route_prompt("Ring Road", area="Kathmandu Valley")
        assert "Kathmandu Valley" in prompt
        assert '"trafficCondition": "Light" | "Moderate" | "Heavy"' in prompt
        assert "8-10 major stops" in prompt
        assert "Do not wrap in markdown" in prompt


class TestMapUrls:

    @pytest.mark.parametrize("url", [
        "https://maps.google.com/?cid=123",
        "https://www.google.com/maps/place/Ratnapark",
        "https://maps.app.goo.gl/abc",
        "https://www.openstreetmap.org/node/1",
    ])
    def test_map_urls(self, url):
        assert is_map_url(url)
        assert chunk_for_url(url) == GroundingChunk(maps_uri=url)

    @pytest.mark.parametrize("url", [
        "https://en.wikipedia.org/wiki/Ring_Road_(Kathmandu)",
        "https://www.google.com/search?q=ring+road",
    ])
    def test_web_urls(self, url):
        assert not is_map_url(url)
        assert chunk_for_url(url) == GroundingChunk(web_uri=url)


class TestGenerate:

    def test_returns_text_and_citations(self, generator, openai_client):
        openai_client.chat.completions.create.return_value = make_completion(
            '{"busNumber": "X"}',
            urls=["https://maps.google.com/?cid=1", "https://example.com/route"],
        )

        output = generator.generate("Ring Road")

        assert isinstance(output, GeneratorOutput)
        assert output.text == '{"busNumber": "X"}'
        assert output.grounding_chunks == [
            GroundingChunk(maps_uri="https://maps.google.com/?cid=1"),
            GroundingChunk(web_uri="https://example.com/route"),
        ]

    def test_request_uses_web_search_with_location(self, generator, openai_client):
        openai_client.chat.completions.create.return_value = make_completion("{}")

        generator.generate("Ring Road")

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-search-model"
        assert "Ring Road" in kwargs["messages"][0]["content"]
        location = kwargs["web_search_options"]["user_location"]["approximate"]
        assert location["country"] == "NP"
        assert location["city"] == "Kathmandu"

    def test_ignores_non_citation_annotations(self, generator, openai_client):
        completion = make_completion("{}")
        completion.choices[0].message.annotations = [Mock(type="file_citation")]
        openai_client.chat.completions.create.return_value = completion

        assert generator.generate("Ring Road").grounding_chunks == []

    def test_missing_content_and_annotations(self, generator, openai_client):
        completion = make_completion(None)
        completion.choices[0].message.annotations = None
        openai_client.chat.completions.create.return_value = completion

        output = generator.generate("Ring Road")
        assert output.text == ""
        assert output.grounding_chunks == []

    def test_no_choices(self, generator, openai_client):
        openai_client.chat.completions.create.return_value = Mock(choices=[])
        assert generator.generate("Ring Road") == GeneratorOutput()

    def test_api_error_becomes_transport_failure(self, generator, openai_client):
        error = APIError("Server error", request=Mock(), body=None)
        openai_client.chat.completions.create.side_effect = error

        with pytest.raises(TransportFailure) as exc_info:
            generator.generate("Ring Road")
        assert exc_info.value.__cause__ is error

    def test_rate_limit_becomes_transport_failure(self, generator, openai_client):
        mock_response = Mock()
        mock_response.status_code = 429
        openai_client.chat.completions.create.side_effect = RateLimitError(
            "Rate limit exceeded",
            response=mock_response,
            body=None
        )

        with pytest.raises(TransportFailure):
            generator.generate("Ring Road")


class TestInitialization:

    def test_requires_api_key_without_client(self, mocker):
        mock_config = mocker.patch('route_generator.get_config')
        mock_config.return_value.openai_api_key = None
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            OpenAIRouteGenerator()

    def test_model_defaults_to_config(self, openai_client):
        from config import get_config
        assert OpenAIRouteGenerator(openai_client=openai_client).model == get_config().openai_model
