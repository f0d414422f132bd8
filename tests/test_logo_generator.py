import asyncio

import pytest

from conftest import make_generator
from fakes import ANALYSIS, FakeOpenAI, studio_handler
from logo_studio.errors import GenerationFailure
from logo_studio.prompts import LOGO_SYSTEM_PROMPT, PICTORIAL_VARIANT_DIRECTIVE
from logo_studio.schemas import BrandAnalysis, LogoType, TranscriptEntry


@pytest.fixture()
def brand_analysis():
    return BrandAnalysis.model_validate(ANALYSIS)


def test_analyze_sends_formatted_transcript():
    fake = FakeOpenAI(studio_handler())
    generator = make_generator(fake)
    transcript = [
        TranscriptEntry(speaker="Designer", text="Tell me about Tidewater.", timestamp="00:01"),
        TranscriptEntry(speaker="Client", text="We inspect hulls with robots."),
    ]

    analysis = asyncio.run(generator.analyze(transcript))

    assert analysis.company_name == "Tidewater Labs"
    prompt = fake.responses.calls[0]["input"]
    assert prompt.endswith("TRANSCRIPT:\n[00:01] Designer: Tell me about Tidewater.\nClient: We inspect hulls with robots.")
    assert fake.responses.calls[0]["model"] == "analysis-model"
    assert "instructions" not in fake.responses.calls[0]


def test_generate_uses_system_prompt_and_variant(brand_analysis):
    fake = FakeOpenAI(studio_handler())
    generator = make_generator(fake)

    logo = asyncio.run(generator.generate(LogoType.PICTORIAL, brand_analysis, variant=2))

    assert logo.logo_type == LogoType.PICTORIAL
    call = fake.responses.calls[0]
    assert call["instructions"] == LOGO_SYSTEM_PROMPT
    assert call["model"] == "concept-model"
    assert PICTORIAL_VARIANT_DIRECTIVE.strip() in call["input"]


def test_generate_all_returns_every_type_in_order(brand_analysis):
    generator = make_generator(FakeOpenAI(studio_handler()))

    logos = asyncio.run(generator.generate_all(brand_analysis))

    assert [logo.logo_type for logo in logos] == [LogoType.WORDMARK, LogoType.PICTORIAL, LogoType.ABSTRACT]


def test_generate_all_keeps_partial_successes(brand_analysis):
    fake = FakeOpenAI(studio_handler(failing={"pictorial": RuntimeError("model overloaded")}))
    generator = make_generator(fake)

    logos = asyncio.run(generator.generate_all(brand_analysis))

    assert len(logos) == 2
    assert {logo.logo_type for logo in logos} == {LogoType.WORDMARK, LogoType.ABSTRACT}
    # wordmark + abstract once each, pictorial three times
    assert len(fake.responses.calls) == 5


def test_generate_all_raises_with_every_reason_when_all_fail(brand_analysis):
    fake = FakeOpenAI(
        studio_handler(
            failing={
                "wordmark": RuntimeError("wordmark timed out"),
                "pictorial": RuntimeError("pictorial refused"),
                "abstract": RuntimeError("abstract garbled"),
            }
        )
    )
    generator = make_generator(fake)

    with pytest.raises(GenerationFailure) as excinfo:
        asyncio.run(generator.generate_all(brand_analysis))

    message = str(excinfo.value)
    assert "wordmark: " in message and "wordmark timed out" in message
    assert "pictorial: " in message and "pictorial refused" in message
    assert "abstract: " in message and "abstract garbled" in message
