"""
Prompts sent to the generative model.
"""

IMAGE_DESCRIPTION_PROMPT = (
    "Comprehensively analyze this image. Extract all visible text, describe "
    "content, identify key elements, and provide detailed insights."
)

PDF_SUMMARY_PROMPT = (
    "Comprehensively analyze this PDF text. Extract key information, summarize "
    "content, identify important details, and provide structured insights:"
)

CERTIFICATE_EXTRACTION_PROMPT = """Extract structured information from this image.
Provide the details in a JSON format with the following keys:
- recipientName: Full name of the recipient
- eventTitle: Title of the event or seminar
- eventDate: Date of the event
- description: Detailed description of the achievement
- issuedBy: Organization or institution issuing the certificate
- additionalNotes: Any additional relevant information

Format the response as a clean, parseable JSON object.
If any information is missing, use null for that field."""


def build_pdf_summary_prompt(pdf_text: str) -> str:
    """Append the extracted document text to the summary instructions."""
    return f"{PDF_SUMMARY_PROMPT}{pdf_text}"
