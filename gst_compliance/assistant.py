from loguru import logger

from .filing_store import AssistantExchange


DEFAULT_ANSWER = ("I'm here to help with GST compliance! "
                  "For accurate filing advice, please consult a tax professional.")

# (keywords, answer), checked in order
KEYWORD_ANSWERS = [
    (("gstr-1", "gstr1"),
     "GSTR-1 is a return that contains details of all outward supplies (sales). It must be filed by the 10th of "
     "the following month. You need to include invoice-wise details of all sales."),
    (("gstr-3b", "gstr3b"),
     "GSTR-3B is a monthly summary return that must be filed by the 20th of the following month. It includes summary "
     "of outward supplies, input tax credit claimed, and tax payment details."),
    (("deadline", "due date"),
     "GST filing deadlines are: GSTR-1 by the 10th, GSTR-3B by the 20th of the following month. "
     "The annual return GSTR-9 is due by 31st December."),
    (("itc", "input tax"),
     "Input Tax Credit (ITC) allows you to reduce your tax liability by claiming credit for taxes paid on your purchases. "
     "You need valid tax invoices from registered suppliers to claim ITC."),
    (("rate", "tax slab"),
     "Common GST rates are: 0% (essential goods), 5% (common items), 12% and 18% (standard rates), and 28% (luxury items). "
     "The rate depends on the HSN code of your products."),
    (("penalty", "late"),
     "Late filing of GST returns attracts a penalty of ₹50 per day (₹20 for nil returns) and interest at 18% per annum "
     "on the tax amount due."),
    (("hsn", "sac"),
     "HSN (Harmonized System of Nomenclature) codes are used to classify goods. SAC (Services Accounting Code) is used "
     "for services. You need to include the appropriate code on your invoices based on your products/services."),
]


def keyword_answer(question):
    """canned answer for well-known topics, None if nothing matches"""
    lowered = question.lower()
    for keywords, answer in KEYWORD_ANSWERS:
        if any(kw in lowered for kw in keywords):
            return answer
    return None


def filing_context(filing):
    if filing is None:
        return ""
    calc = filing.tax_calculation
    return (f"User's latest filing shows total sales of ₹{calc.total_sales:,.2f} "
            f"with tax liability of ₹{calc.total_tax:.2f}.")


class GSTAssistant:
    """answers free-text GST questions from the knowledge base"""

    def __init__(self, retriever, text_generator, max_results=3):
        self.retriever = retriever
        self.text_generator = text_generator
        self.max_results = max_results

    def _fallback_answer(self, question, results, context):
        answer = keyword_answer(question)
        if answer is None and results:
            answer = " ".join(results[0].document.content.split())
        if answer is None:
            answer = DEFAULT_ANSWER
        if context:
            answer = f"{answer}\n\n{context}"
        return answer

    def _build_prompt(self, question, results, context):
        prompt = ""
        if context:
            prompt += f"Context: {context}\n\n"
        if results:
            knowledge = "\n".join(f"- {r.document.content}" for r in results)
            prompt += f"Relevant GST Knowledge:\n{knowledge}\n\n"
        prompt += f"Question: {question}"
        return prompt

    def answer(self, question, latest_filing=None):
        """
        answer a question
        raises ValueError for a blank question
        """
        if question is None or not question.strip():
            raise ValueError("Question is required")

        question = question.strip()
        logger.info(f"Assistant question: '{question[:100]}'")

        results = self.retriever.retrieve(question, max_results=self.max_results)
        context = filing_context(latest_filing)

        fallback = self._fallback_answer(question, results, context)
        generation = self.text_generator.generate(self._build_prompt(question, results, context), fallback=fallback)

        return AssistantExchange(
            question=question,
            answer=generation.text,
            sources=[r.document.id for r in results],
            generated=generation.generated,
        )
