import asyncio

import pytest


def test_construction_requires_providers():
    from clipnote.llm.errors import ConfigurationError
    from clipnote.llm.service import AIService

    with pytest.raises(ConfigurationError):
        AIService([])
    with pytest.raises(ConfigurationError):
        AIService(None)


def test_construction_rejects_duplicate_names(make_provider):
    from clipnote.llm.errors import ConfigurationError
    from clipnote.llm.service import AIService

    with pytest.raises(ConfigurationError, match="Duplicate"):
        AIService([make_provider("A"), make_provider("A")])


def test_process_falls_back_past_empty_result_and_stops_at_first_success(
    run, make_provider
):
    from clipnote.llm.service import AIService

    a = make_provider("A", result="   ")
    b = make_provider("B", model="b-1", result="  ok  ")
    c = make_provider("C", result="never")

    result = run(AIService([a, b, c]).process("some prompt"))

    assert result.provider == "B"
    assert result.model == "b-1"
    assert result.content == "ok"
    assert len(a.calls) == 1
    assert len(b.calls) == 1
    assert c.calls == []


def test_process_falls_back_past_errors(run, make_provider):
    from clipnote.llm.errors import NetworkError
    from clipnote.llm.service import AIService

    a = make_provider("A", error=NetworkError("down"))
    b = make_provider("B", result="fine")

    assert run(AIService([a, b]).process("prompt")).content == "fine"


def test_process_aggregates_when_all_fail(run, make_provider):
    from clipnote.llm.errors import (
        AggregateFailureError,
        AuthenticationError,
        EmptyResponseError,
    )
    from clipnote.llm.service import AIService

    a = make_provider("A", error=AuthenticationError("bad key"))
    b = make_provider("B", result="")

    with pytest.raises(AggregateFailureError) as exc:
        run(AIService([a, b]).process("prompt"))

    err = exc.value
    assert str(err) == "AI processing failed: Empty response from B"
    assert isinstance(err.last_error, EmptyResponseError)
    assert [name for name, _ in err.attempts] == ["A", "B"]


def test_process_rejects_empty_prompt(run, make_provider):
    from clipnote.llm.errors import PromptValidationError
    from clipnote.llm.service import AIService

    provider = make_provider("A")
    with pytest.raises(PromptValidationError):
        run(AIService([provider]).process(""))
    assert provider.calls == []


def test_process_with_unknown_provider(run, make_provider):
    from clipnote.llm.errors import ProviderNotFoundError
    from clipnote.llm.service import AIService

    with pytest.raises(ProviderNotFoundError, match="Nope"):
        run(AIService([make_provider("A")]).process_with("Nope", "prompt"))


def test_process_with_applies_model_override_for_one_request(run, make_provider):
    from clipnote.llm.service import AIService

    a = make_provider("A", model="default")
    b = make_provider("B", model="b-default")
    service = AIService([a, b])

    result = run(service.process_with("B", "prompt", "b-special"))

    assert result.provider == "B"
    assert result.model == "b-special"
    assert b.models_used == ["b-special"]
    assert b.model == "b-default"
    assert a.calls == []


def test_model_override_does_not_leak_into_concurrent_calls(run, make_provider):
    from clipnote.llm.service import AIService

    seen = []

    class AwaitingProvider(make_provider):
        async def process(self, prompt):
            seen.append((prompt, self.model))
            await asyncio.sleep(0.01)
            return f"{prompt} text"

    provider = AwaitingProvider("Google Gemini", model="gemini-2.5-pro")
    service = AIService([provider])

    async def both():
        return await asyncio.gather(
            service.process_with("Google Gemini", "one-off", "gemini-2.0-flash"),
            service.process("plain"),
        )

    override_result, plain_result = run(both())

    assert sorted(seen) == [
        ("one-off", "gemini-2.0-flash"),
        ("plain", "gemini-2.5-pro"),
    ]
    assert override_result.model == "gemini-2.0-flash"
    assert plain_result.model == "gemini-2.5-pro"
    assert provider.model == "gemini-2.5-pro"


def test_response_reports_model_that_was_sent(run, make_provider):
    from clipnote.llm.service import AIService

    class SwitchingProvider(make_provider):
        async def process(self, prompt):
            model_at_send = self.model
            self.model = "switched-mid-call"
            return f"answered by {model_at_send}"

    result = run(AIService([SwitchingProvider("A", model="sent")]).process("prompt"))
    assert result.content == "answered by sent"
    assert result.model == "sent"


def test_process_with_override_is_noop_without_model_switching(run, make_provider):
    from clipnote.llm.service import AIService

    fixed = make_provider("Fixed", model="only-model", supports_model_override=False)
    result = run(AIService([fixed]).process_with("Fixed", "prompt", "other"))
    assert result.model == "only-model"


def test_process_with_wraps_failures_without_fallback(run, make_provider):
    from clipnote.llm.errors import AggregateFailureError, RateLimitOrNotFoundError
    from clipnote.llm.service import AIService

    a = make_provider("A", error=RateLimitOrNotFoundError("slow down", status_code=429))
    b = make_provider("B")

    with pytest.raises(AggregateFailureError, match="slow down"):
        run(AIService([a, b]).process_with("A", "prompt"))
    assert b.calls == []


def test_process_with_empty_result_is_failure(run, make_provider):
    from clipnote.llm.errors import AggregateFailureError, EmptyResponseError
    from clipnote.llm.service import AIService

    with pytest.raises(AggregateFailureError) as exc:
        run(AIService([make_provider("A", result="")]).process_with("A", "prompt"))
    assert isinstance(exc.value.last_error, EmptyResponseError)


def test_bookkeeping(make_provider):
    from clipnote.llm.errors import ConfigurationError
    from clipnote.llm.service import AIService

    service = AIService([make_provider("A")])
    service.add_provider(make_provider("B"))
    assert service.get_provider_names() == ["A", "B"]

    with pytest.raises(ConfigurationError):
        service.add_provider(make_provider("A"))

    assert service.remove_provider("A") is True
    assert service.remove_provider("A") is False
    assert service.get_provider_names() == ["B"]
    assert service.has_available_providers() is True

    assert service.remove_provider("B") is True
    assert service.has_available_providers() is False


def test_process_after_all_removed_is_configuration_error(run, make_provider):
    from clipnote.llm.errors import ConfigurationError
    from clipnote.llm.service import AIService

    service = AIService([make_provider("A")])
    service.remove_provider("A")
    with pytest.raises(ConfigurationError):
        run(service.process("prompt"))


def test_in_flight_call_keeps_its_provider_snapshot(run, make_provider):
    from clipnote.llm.errors import NetworkError
    from clipnote.llm.service import AIService

    b = make_provider("B", result="from B")
    holder = {}

    def drop_b():
        holder["service"].remove_provider("B")

    a = make_provider("A", error=NetworkError("down"), on_call=drop_b)
    service = AIService([a, b])
    holder["service"] = service
    before = service.providers

    result = run(service.process("prompt"))

    assert result.provider == "B"
    assert service.get_provider_names() == ["A"]
    # the old snapshot object is untouched
    assert [p.name for p in before] == ["A", "B"]


def test_get_provider_models_uses_known_options(make_provider):
    from clipnote.llm.service import AIService

    service = AIService([make_provider("Groq")])
    assert "llama-3.3-70b-versatile" in service.get_provider_models("Groq")
    assert service.get_provider_models("Unknown") == []
