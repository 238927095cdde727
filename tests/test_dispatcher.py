import asyncio

from conftest import FakeKnowledge

from wolfybot.services.knowledge.client import NO_SHORT_ANSWER, NOT_UNDERSTOOD_ANSWER, WolframHttpError
from wolfybot.services.nlu.dispatcher import DEFAULT_REPLIES, IntentDispatcher
from wolfybot.services.nlu.models import NluEntity


def _reply(dispatcher, label, entity, text="question"):
    return asyncio.run(dispatcher.reply_for(label, entity, text=text))


def test_greeting():
    knowledge = FakeKnowledge()
    reply = _reply(IntentDispatcher(knowledge), "greetings", NluEntity(confidence=0.9, value="true"))
    assert reply == DEFAULT_REPLIES["greeting"]
    assert knowledge.queries == []


def test_wolfram_answer_is_passed_through():
    knowledge = FakeKnowledge(answer="6")
    entity = NluEntity(confidence=0.8, value="2 times 3")
    assert _reply(IntentDispatcher(knowledge), "wolfram_search_query", entity) == "6"
    assert knowledge.queries == ["2 times 3"]


def test_wolfram_not_understood():
    dispatcher = IntentDispatcher(FakeKnowledge(answer=NOT_UNDERSTOOD_ANSWER))
    reply = _reply(dispatcher, "wolfram_search_query", NluEntity(confidence=0.8, value="zzz"))
    assert reply == DEFAULT_REPLIES["not_understood"]


def test_wolfram_no_short_answer():
    dispatcher = IntentDispatcher(FakeKnowledge(answer=NO_SHORT_ANSWER))
    reply = _reply(dispatcher, "wolfram_search_query", NluEntity(confidence=0.8, value="history of rome"))
    assert reply == DEFAULT_REPLIES["too_long"]


def test_wolfram_error_falls_back_to_unclear():
    knowledge = FakeKnowledge(error=WolframHttpError("denied", status_code=403))
    reply = _reply(IntentDispatcher(knowledge), "wolfram_search_query", NluEntity(confidence=0.8, value="x"))
    assert reply == DEFAULT_REPLIES["unclear"]


def test_non_string_value_uses_body_then_text():
    knowledge = FakeKnowledge(answer="42")
    dispatcher = IntentDispatcher(knowledge)
    _reply(dispatcher, "wolfram_search_query", NluEntity(confidence=0.8, value={"x": 1}, body="meaning of life"))
    _reply(dispatcher, "wolfram_search_query", NluEntity(confidence=0.8, value=7), text="  full text  ")
    assert knowledge.queries == ["meaning of life", "full text"]


def test_unknown_or_missing_label_is_unclear():
    dispatcher = IntentDispatcher(FakeKnowledge())
    assert _reply(dispatcher, None, None) == DEFAULT_REPLIES["unclear"]
    assert _reply(dispatcher, "weather", NluEntity(confidence=0.9)) == DEFAULT_REPLIES["unclear"]


def test_reply_overrides():
    dispatcher = IntentDispatcher(FakeKnowledge(), replies={"greeting": "Howdy!", "bogus": "ignored"})
    assert _reply(dispatcher, "greetings", NluEntity(confidence=0.9)) == "Howdy!"
    assert "bogus" not in dispatcher.replies
