"""Keyword-matched financial assistant.

There is no model behind this: a question is lower-cased and checked against
an ordered list of keyword rules; the first rule that matches wins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from finbins.integrations.contracts.interfaces import ChatRequest, ChatResponse
from finbins.integrations.dispatcher import RequestDispatcher
from finbins.integrations.policy.response_wrappers import RequestValidationError

logger = logging.getLogger(__name__)

GREETING = "Hello! I'm your FINBIN AI assistant. How can I help you with your finances today?"


@dataclass(frozen=True)
class KeywordRule:
    topic: str
    keywords: Sequence[str]
    answer: str

    def matches(self, lowered: str) -> bool:
        return any(k in lowered for k in self.keywords)


RULES: List[KeywordRule] = [
    KeywordRule(
        "save",
        ("save", "saving"),
        "Based on your current spending patterns, you could save an additional $250 per month by reducing "
        "your subscription services and dining out expenses. Would you like me to suggest a savings plan?",
    ),
    KeywordRule(
        "invest",
        ("invest", "investment"),
        "With your current risk profile and financial goals, I would recommend allocating 60% to index funds, "
        "30% to bonds, and 10% to individual stocks. Would you like more specific investment recommendations?",
    ),
    KeywordRule(
        "debt",
        ("debt", "loan"),
        "I recommend prioritizing paying off your high-interest debt first. Based on your current income and "
        "expenses, you could be debt-free in approximately 18 months by allocating an additional $300 per month "
        "to debt repayment.",
    ),
    KeywordRule(
        "budget",
        ("budget", "spending"),
        "Your top spending categories last month were housing (35%), food (20%), and transportation (15%). "
        "Your food spending is 25% higher than the recommended amount for your income level. Would you like "
        "suggestions to reduce this expense?",
    ),
    KeywordRule(
        "emergency",
        ("emergency",),
        "Financial experts recommend having 3-6 months of expenses saved in an emergency fund. Based on your "
        "monthly expenses of $2,400, you should aim for $7,200-$14,400 in your emergency fund.",
    ),
    KeywordRule(
        "retirement",
        ("retire", "retirement"),
        "Based on your current savings rate and retirement goals, you're on track to reach your target "
        "retirement savings by age 67. Increasing your monthly contributions by just $100 could help you "
        "retire 2 years earlier.",
    ),
    KeywordRule(
        "credit",
        ("credit", "score"),
        "Your simulated credit score is in the 'good' range. To improve it, focus on making all payments on "
        "time, reducing your credit utilization ratio to below 30%, and avoiding opening too many new accounts.",
    ),
    KeywordRule(
        "tax",
        ("tax",),
        "Based on your income and deductions, you might be able to save approximately $1,200 in taxes by "
        "maximizing your retirement contributions and taking advantage of available tax credits.",
    ),
    KeywordRule(
        "insurance",
        ("insurance",),
        "Your current insurance coverage appears adequate, but you might consider increasing your liability "
        "coverage and adding an umbrella policy for better protection of your growing assets.",
    ),
    KeywordRule(
        "mortgage",
        ("mortgage", "refinance"),
        "With current interest rates, refinancing your mortgage could save you approximately $150 per month. "
        "However, you should consider the closing costs and how long you plan to stay in your home.",
    ),
    KeywordRule(
        "car",
        ("car", "vehicle"),
        "Based on your financial situation, you could comfortably afford a car payment of up to $350 per month. "
        "Remember to factor in insurance, maintenance, and fuel costs when budgeting for a vehicle purchase.",
    ),
    KeywordRule(
        "college",
        ("college", "education"),
        "For your children's education fund, consider a 529 plan which offers tax advantages. Starting with "
        "$200 monthly contributions now could grow to approximately $58,000 in 18 years, assuming a 6% annual "
        "return.",
    ),
    KeywordRule(
        "wedding",
        ("wedding", "marry"),
        "For a wedding budget, the average cost is around $28,000, but you can have a wonderful celebration for "
        "much less by prioritizing what matters most to you and being creative with venue and catering options.",
    ),
    KeywordRule(
        "vacation",
        ("vacation", "travel"),
        "Based on your savings rate, you could save enough for a $3,000 vacation in about 6 months by setting "
        "aside $500 monthly in your 'Vacation' savings bucket.",
    ),
    KeywordRule(
        "house",
        ("house", "home"),
        "To save for a house down payment, aim for at least 20% of the home's value to avoid private mortgage "
        "insurance. For a $300,000 home, that's $60,000. At your current savings rate, this would take "
        "approximately 4 years.",
    ),
    KeywordRule(
        "help",
        ("help", "what can you do"),
        "I can help with various financial topics including budgeting, saving, investing, debt management, "
        "retirement planning, and more. Just ask me a specific question about your finances!",
    ),
]


class FinancialAssistant:
    def __init__(self, rules: Optional[Sequence[KeywordRule]] = None):
        self.rules = list(rules) if rules is not None else RULES

    def match(self, question: str) -> Optional[KeywordRule]:
        lowered = (question or "").lower()
        for rule in self.rules:
            if rule.matches(lowered):
                return rule
        return None

    def respond(self, question: str) -> str:
        rule = self.match(question)
        if rule is not None:
            return rule.answer
        return (
            "Based on your financial profile, I'd recommend focusing on building your emergency fund first, "
            "then paying down high-interest debt. Your question about "
            f"\"{question}\" is important, and I'd be happy to provide more specific advice if you could "
            "provide more details."
        )


class AssistantService:
    """Answers chat questions locally for demo sessions, via /ai-chat otherwise."""

    def __init__(self, dispatcher: RequestDispatcher, assistant: Optional[FinancialAssistant] = None):
        self.dispatcher = dispatcher
        self.assistant = assistant or FinancialAssistant()

    async def ask(self, question: str) -> str:
        if not (question or "").strip():
            raise RequestValidationError("Question is required")

        profile = self.dispatcher.storage.get_user_profile()
        session = self.dispatcher.current_session()
        if session.is_synthetic:
            logger.info("Answering demo question locally for user %s", session.user_id)
            return self.assistant.respond(question)

        data = await self.dispatcher.request(
            f"/ai-chat/{profile.id}",
            method="POST",
            body=ChatRequest(question=question).to_wire(),
            session=session,
        )
        return ChatResponse.model_validate(data).response
