"""Text tools: one prompt in, text out."""

from typing import Literal

from pydantic import Field

from ..errors import InputValidationError
from ..llm import GenerativeProvider, ResearchResult
from ..prompts import get_system_instruction
from ..streaming import Conversation, stream_into
from ..streaming.conversation import FragmentCallback
from .base import CreativeToolBase, ToolForm
from .models import CodeResult



# -- Story writer ------------------------------------------------------------


class StoryForm(ToolForm):
    prompt: str = ""


class StoryWriter(CreativeToolBase[StoryForm, str]):
    """Streams a story into a single growing text.

    Each fragment is passed to ``on_fragment`` as it arrives. A stream that
    fails part way leaves no partial story behind.
    """

    name = "Story Writer"
    form_model = StoryForm
    failure_message = "Failed to generate story stream from Gemini API."

    def __init__(self, on_fragment: FragmentCallback | None = None):
        self._on_fragment = on_fragment
        self._conversation = Conversation()

    def validate(self, form: StoryForm) -> None:
        if not form.prompt:
            raise InputValidationError("Please enter a prompt for your story.")

    async def execute(self, provider: GenerativeProvider, form: StoryForm) -> str:
        self._conversation.clear()
        self._conversation.add_user_turn(form.prompt)
        stream = await provider.complete_text_stream(
            form.prompt,
            system_instruction=get_system_instruction("story_writer"),
        )
        message = await stream_into(self._conversation, stream, self._on_fragment)
        return message.text


# -- Slogans -----------------------------------------------------------------


class SloganForm(ToolForm):
    product_name: str = ""
    description: str = ""


def parse_slogans(text: str) -> list[str]:
    """Split a newline-separated list, dropping blanks and leading ``- ``."""
    slogans = []
    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue
        if line.startswith("- "):
            line = line[2:].strip()
        if line:
            slogans.append(line)
    return slogans


class SloganGenerator(CreativeToolBase[SloganForm, list[str]]):
    name = "Slogan Generator"
    form_model = SloganForm
    failure_message = "Failed to generate text from Gemini API."

    def validate(self, form: SloganForm) -> None:
        if not form.product_name or not form.description:
            raise InputValidationError("Please provide both a product name and description.")

    async def execute(self, provider: GenerativeProvider, form: SloganForm) -> list[str]:
        prompt = (
            f'Generate 5 catchy and memorable slogans for a product named "{form.product_name}". '
            f'The product is described as: "{form.description}". '
            "Return the slogans as a simple list separated by newlines."
        )
        text = await provider.complete_text(
            prompt,
            system_instruction=get_system_instruction("slogan_generator"),
        )
        return parse_slogans(text)


# -- Research ----------------------------------------------------------------


class ResearchForm(ToolForm):
    query: str = ""


class ResearchAssistant(CreativeToolBase[ResearchForm, ResearchResult]):
    """Answers a query with web-grounded sources."""

    name = "Research Assistant"
    form_model = ResearchForm
    failure_message = "Failed to perform research with Gemini API."

    def validate(self, form: ResearchForm) -> None:
        if not form.query:
            raise InputValidationError("Please enter a research query.")

    async def execute(self, provider: GenerativeProvider, form: ResearchForm) -> ResearchResult:
        return await provider.research(form.query)


# -- Email -------------------------------------------------------------------

EmailPurpose = Literal["Meeting Request", "Thank You", "Follow-up", "Inquiry", "Apology", "Custom"]
EmailTone = Literal["Formal", "Casual", "Friendly", "Persuasive", "Direct"]

EMAIL_PURPOSES: tuple[str, ...] = ("Meeting Request", "Thank You", "Follow-up", "Inquiry", "Apology", "Custom")
EMAIL_TONES: tuple[str, ...] = ("Formal", "Casual", "Friendly", "Persuasive", "Direct")


class EmailForm(ToolForm):
    purpose: EmailPurpose = "Meeting Request"
    custom_purpose: str = ""
    recipient_info: str = ""
    tone: EmailTone = "Formal"
    more_info: str = ""

    @property
    def effective_purpose(self) -> str:
        return self.custom_purpose if self.purpose == "Custom" else self.purpose


class EmailWriter(CreativeToolBase[EmailForm, str]):
    name = "Email Writer"
    form_model = EmailForm
    failure_message = "Failed to generate email from Gemini API."

    def validate(self, form: EmailForm) -> None:
        if not form.effective_purpose or not form.recipient_info:
            raise InputValidationError("Please provide the purpose and recipient information.")

    async def execute(self, provider: GenerativeProvider, form: EmailForm) -> str:
        prompt = (
            "Please write an email with the following specifications:\n"
            f"- **Purpose:** {form.effective_purpose}\n"
            f"- **Recipient Information:** {form.recipient_info}\n"
            f"- **Tone:** {form.tone}\n"
            f"- **Additional Information/Context:** {form.more_info}\n"
            "\n"
            'Return the email as a single block of text, starting with "Subject: [Your Subject]".'
        )
        return await provider.complete_text(
            prompt,
            system_instruction=get_system_instruction("email_writer"),
            temperature=0.7,
        )


# -- Social media ------------------------------------------------------------

SocialPlatform = Literal["Twitter (X)", "Instagram", "LinkedIn", "Facebook"]
SocialTone = Literal["Professional", "Witty", "Inspirational", "Casual", "Excited"]

SOCIAL_PLATFORMS: tuple[str, ...] = ("Twitter (X)", "Instagram", "LinkedIn", "Facebook")
SOCIAL_TONES: tuple[str, ...] = ("Professional", "Witty", "Inspirational", "Casual", "Excited")


class SocialPostForm(ToolForm):
    topic: str = ""
    platform: SocialPlatform = "Twitter (X)"
    tone: SocialTone = "Professional"


class SocialMediaPostGenerator(CreativeToolBase[SocialPostForm, str]):
    name = "Social Media Post Generator"
    form_model = SocialPostForm
    failure_message = "Failed to generate social media post from Gemini API."

    def validate(self, form: SocialPostForm) -> None:
        if not form.topic:
            raise InputValidationError("Please provide a topic for the social media post.")

    async def execute(self, provider: GenerativeProvider, form: SocialPostForm) -> str:
        prompt = (
            f'Create a social media post for {form.platform} about "{form.topic}". '
            f"The tone of the post should be {form.tone}. "
            "Include 3-5 relevant and popular hashtags."
        )
        return await provider.complete_text(
            prompt,
            system_instruction=get_system_instruction("social_media"),
            temperature=0.7,
        )


# -- Code assistant ----------------------------------------------------------

CodeLanguage = Literal["Python", "JavaScript", "Java", "C++", "HTML", "CSS", "SQL", "TypeScript", "Go"]
CODE_LANGUAGES: tuple[str, ...] = ("Python", "JavaScript", "Java", "C++", "HTML", "CSS", "SQL", "TypeScript", "Go")


class CodeForm(ToolForm):
    mode: Literal["generate", "debug"] = "generate"
    language: CodeLanguage = "Python"
    description: str = ""
    code: str = ""
    error_description: str = ""


class CodeAssistant(CreativeToolBase[CodeForm, CodeResult]):
    """Generates code from a description or debugs a snippet."""

    name = "Code Assistant"
    form_model = CodeForm

    def validate(self, form: CodeForm) -> None:
        if form.mode == "generate" and not form.description:
            raise InputValidationError("Please provide a description of the code you want to generate.")
        if form.mode == "debug" and (not form.code or not form.error_description):
            raise InputValidationError("Please provide both the code and a description of the error.")

    def failure_message_for(self, form: CodeForm) -> str:
        if form.mode == "debug":
            return "Failed to debug code with Gemini API."
        return "Failed to generate code from Gemini API."

    async def execute(self, provider: GenerativeProvider, form: CodeForm) -> CodeResult:
        if form.mode == "debug":
            prompt = (
                f"Language: {form.language}\n\n"
                f"Code with bug:\n```{form.language.lower()}\n{form.code}\n```\n\n"
                f"Error/Problem Description: {form.error_description}"
            )
            text = await provider.complete_text(
                prompt,
                system_instruction=get_system_instruction("code_debugger"),
                temperature=0.1,
            )
        else:
            text = await provider.complete_text(
                f"Generate a code snippet in {form.language} for the following task: {form.description}",
                system_instruction=get_system_instruction("code_generator", language=form.language),
                temperature=0.2,
            )
        return CodeResult(language=form.language, mode=form.mode, text=text)


# -- Document analyst --------------------------------------------------------

AnalysisMode = Literal["summarize", "extract", "qa"]


class DocumentForm(ToolForm):
    document: str = ""
    mode: AnalysisMode = "summarize"
    question: str = Field(default="", description="Required in qa mode")


def build_document_prompt(form: DocumentForm) -> str:
    if form.mode == "summarize":
        return f"Please provide a concise summary of the following document:\n\n---\n\n{form.document}"
    if form.mode == "extract":
        return (
            "Extract the key points from the following document. "
            f"Present them as a clear, bulleted list:\n\n---\n\n{form.document}"
        )
    return (
        "Based *only* on the content of the document provided, answer the following question.\n\n"
        f'Question: "{form.question}"\n\n'
        f"Document:\n---\n\n{form.document}"
    )


class DocumentAnalyst(CreativeToolBase[DocumentForm, str]):
    name = "Document Analyst"
    form_model = DocumentForm
    failure_message = "Failed to analyze document with Gemini API."

    def validate(self, form: DocumentForm) -> None:
        if not form.document:
            raise InputValidationError("Please provide some text to analyze.")
        if form.mode == "qa" and not form.question:
            raise InputValidationError("Please enter a question to ask about the document.")

    async def execute(self, provider: GenerativeProvider, form: DocumentForm) -> str:
        return await provider.complete_text(
            build_document_prompt(form),
            system_instruction=get_system_instruction("document_analyst"),
        )
