"""
Tests for prompt templates and chat request types.

Guards the wording the model depends on, since small prompt edits
change model output.
"""

from term_intel.llm import (
    ChatMessage,
    ChatOptions,
    ChatRequest,
    ComprehensionPrompts,
    PromptTemplate,
    Role,
)


class TestPromptTemplate:
    def test_messages(self):
        template = PromptTemplate(name="t", system="sys", user="Define {term}.")

        system, user = template.messages(term="qubit")

        assert system == ChatMessage(Role.SYSTEM, "sys")
        assert user == ChatMessage(Role.USER, "Define qubit.")

    def test_user_without_variables(self):
        template = PromptTemplate(name="t", system="sys", user="Literal {braces}")

        assert template.format_user() == "Literal {braces}"


class TestComprehensionPrompts:
    def test_analyze_system_prompt(self):
        system = ComprehensionPrompts.ANALYZE.system

        assert "same language as the input query" in system
        assert "```json" in system
        for field in ("definition", "category", "concepts", "confidence"):
            assert f'"{field}"' in system

    def test_analyze_evidence_verbatim(self):
        evidence = "Result {1}: braces and\nnewlines stay as they are"

        _, user = ComprehensionPrompts.ANALYZE.messages(
            query="q", keywords="k", search_results=evidence
        )

        assert user.content.endswith("Search Results:\n" + evidence)


class TestChatRequest:
    def test_payload(self):
        request = ChatRequest(
            model="llama3.2:latest",
            messages=(ChatMessage.user("hi"),),
        )

        assert request.to_payload() == {
            "model": "llama3.2:latest",
            "messages": [{"role": "user", "content": "hi"}],
            "stream": True,
            "options": {"temperature": 0.0, "top_p": 1.0, "top_k": 1},
        }

    def test_num_ctx_only_when_set(self):
        assert "num_ctx" not in ChatOptions().to_dict()
        assert ChatOptions(num_ctx=4096).to_dict()["num_ctx"] == 4096
