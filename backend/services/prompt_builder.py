"""All prompt templates for the completion service."""

SYSTEM_PROMPT = """You are a precise data extraction engine for Indian government job notifications.

STRICT RULES:
1. Extract ONLY information explicitly present in the provided text.
2. NEVER invent, assume, or infer data not stated in the text.
3. If a field is not found, return null - never guess.
4. Return ONLY valid JSON matching the exact schema provided.
5. No markdown, no explanation, no text before or after the JSON.
6. Dates MUST be in ISO format: YYYY-MM-DD. If only month/year given, use first of month.
7. Numbers must be actual numbers (integers/floats), not strings.
8. difficultyScore must be 1-10 (integer).
9. competitionLevel must be exactly: "Low", "Medium", or "High".
10. If multiple posts exist in one notification, set "multipleJobs": true.

You are a data extractor, not a writer. Stay faithful to source text."""

EXTRACTION_SCHEMA = """{
  "jobInfo": {
    "title": string | null,
    "department": string | null,
    "organization": string | null,
    "advertisementNumber": string | null,
    "notificationDate": "YYYY-MM-DD" | null,
    "location": string | null,
    "state": string | null,
    "isNational": boolean | null,
    "officialWebsite": string | null,
    "officialPDFLink": string | null,
    "applicationMode": "Online" | "Offline" | "Both" | null,
    "category": "SSC" | "Railway" | "Banking" | "Defence" | "StatePSC" | "Police" | "Teaching" | "Private" | null,
    "subCategory": string | null
  },
  "vacancies": {
    "total": number | null,
    "general": number | null,
    "obc": number | null,
    "sc": number | null,
    "st": number | null,
    "ews": number | null,
    "pwbd": number | null,
    "exServicemen": number | null,
    "notes": string | null
  },
  "salary": {
    "minimum": number | null,
    "maximum": number | null,
    "payLevel": string | null,
    "gradePay": string | null,
    "allowances": string | null,
    "rawText": string | null
  },
  "eligibility": {
    "qualificationRequired": string | null,
    "streamOrDiscipline": string | null,
    "experienceRequired": string | null,
    "minimumPercentage": number | null,
    "additionalRequirements": string | null
  },
  "ageCriteria": {
    "minimumAge": number | null,
    "maximumAge": number | null,
    "relaxation": {
      "obc": number | null,
      "scSt": number | null,
      "pwbd": number | null,
      "exServicemen": number | null,
      "otherRelaxation": string | null
    }
  },
  "applicationFees": {
    "general": number | null,
    "obc": number | null,
    "scSt": number | null,
    "female": number | null,
    "pwbd": number | null,
    "paymentMode": string | null
  },
  "importantDates": {
    "applicationStartDate": "YYYY-MM-DD" | null,
    "applicationLastDate": "YYYY-MM-DD" | null,
    "feePaymentLastDate": "YYYY-MM-DD" | null,
    "admitCardDate": "YYYY-MM-DD" | null,
    "examDate": "YYYY-MM-DD" | null,
    "resultDate": "YYYY-MM-DD" | null
  },
  "selectionProcess": [
    { "stage": number, "name": string, "description": string | null }
  ],
  "syllabus": [
    { "subject": string, "topics": string[] }
  ],
  "examPattern": {
    "numberOfPapers": number | null,
    "totalQuestions": number | null,
    "totalMarks": number | null,
    "durationMinutes": number | null,
    "negativeMarking": number | null,
    "mode": "Online" | "Offline" | "Both" | null,
    "sections": [
      { "name": string, "questions": number | null, "marks": number | null }
    ]
  },
  "requiredDocuments": string[],
  "multipleJobs": boolean,
  "aiInsights": {
    "shortSummary": string,
    "difficultyScore": number,
    "competitionLevel": "Low" | "Medium" | "High",
    "estimatedPreparationTime": "1–2 months" | "3–4 months" | "6+ months",
    "recommendedStrategy": string
  }
}"""

_TEXT_RULE = "─" * 65


def build_extraction_prompt(text: str, chunk_index: int = 0, total_chunks: int = 1) -> str:
    """Per-chunk extraction prompt with the fixed schema template."""
    chunk_note = ""
    if total_chunks > 1:
        chunk_note = (
            f"NOTE: This is chunk {chunk_index + 1} of {total_chunks}. "
            "Extract all fields visible in this section. "
            "Return null for fields not present in this chunk.\n\n"
        )

    return f"""{chunk_note}Extract structured data from the following Indian government job notification.

Return ONLY this JSON structure. Do not add any extra keys:

{EXTRACTION_SCHEMA}

IMPORTANT:
- shortSummary: 100-400 characters, professional, non-promotional, factual
- difficultyScore: integer 1-10 based on vacancy count, exam complexity, stages
- estimatedPreparationTime: one of "1–2 months", "3–4 months", "6+ months"
- recommendedStrategy: 2-3 sentences, concise and actionable
- multipleJobs: set to true only if notification covers MULTIPLE distinct posts

NOTIFICATION TEXT:
{_TEXT_RULE}
{text}
{_TEXT_RULE}"""


def build_multi_post_prompt(text: str) -> str:
    """Secondary pass: enumerate the individual posts of a multi-post notification."""
    return f"""This government notification contains MULTIPLE distinct job posts.
Extract each post as a SEPARATE entry.

Return JSON array:
[
  {{
    "postName": string,
    "vacancies": number | null,
    "eligibility": string | null,
    "payLevel": string | null,
    "ageLimit": string | null
  }}
]

Return ONLY the JSON array. No explanation.

NOTIFICATION TEXT:
{text}"""
