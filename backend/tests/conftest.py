"""Shared test configuration, fixtures and pytest markers."""

import copy
import json

import pytest

from services.gemini_client import CompletionResult, CompletionService


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: calls the live Gemini API (needs GEMINI_API_KEY)"
    )


VALID_JOB = {
    "jobInfo": {
        "title": "Junior Engineer (Civil)",
        "department": "Ministry of Railways",
        "organization": "Railway Recruitment Board",
        "advertisementNumber": "RRB/2024/01",
        "notificationDate": "2024-01-15",
        "location": "All India",
        "state": None,
        "isNational": True,
        "officialWebsite": "https://rrbchennai.gov.in",
        "officialPDFLink": None,
        "applicationMode": "Online",
        "category": "Railway",
        "subCategory": "RRB JE",
    },
    "vacancies": {
        "total": 7951,
        "general": 3576,
        "obc": 2143,
        "sc": 1192,
        "st": 794,
        "ews": 246,
        "pwbd": None,
        "exServicemen": None,
        "notes": None,
    },
    "salary": {
        "minimum": 35400,
        "maximum": 112400,
        "payLevel": "Level 6",
        "gradePay": None,
        "allowances": "DA, HRA, Transport",
        "rawText": "₹35,400–1,12,400 (Level-6)",
    },
    "eligibility": {
        "qualificationRequired": "B.E./B.Tech (Civil Engineering)",
        "streamOrDiscipline": "Civil Engineering",
        "experienceRequired": None,
        "minimumPercentage": None,
        "additionalRequirements": None,
    },
    "ageCriteria": {
        "minimumAge": 18,
        "maximumAge": 33,
        "relaxation": {
            "obc": 3,
            "scSt": 5,
            "pwbd": 10,
            "exServicemen": None,
            "otherRelaxation": None,
        },
    },
    "applicationFees": {
        "general": 500,
        "obc": 500,
        "scSt": 250,
        "female": 250,
        "pwbd": None,
        "paymentMode": "Online (Debit/Credit Card, UPI)",
    },
    "importantDates": {
        "applicationStartDate": "2024-01-20",
        "applicationLastDate": "2024-02-19",
        "feePaymentLastDate": "2024-02-20",
        "admitCardDate": None,
        "examDate": "2024-05-01",
        "resultDate": None,
    },
    "selectionProcess": [
        {"stage": 1, "name": "Computer Based Test (CBT)", "description": "120 questions, 90 minutes"},
        {"stage": 2, "name": "Computer Based Aptitude Test", "description": "For ALP posts only"},
        {"stage": 3, "name": "Document Verification", "description": None},
        {"stage": 4, "name": "Medical Examination", "description": None},
    ],
    "syllabus": [
        {"subject": "Mathematics", "topics": ["Algebra", "Trigonometry", "Statistics"]},
        {"subject": "General Intelligence", "topics": ["Analogies", "Coding-Decoding"]},
        {"subject": "General Science", "topics": ["Physics", "Chemistry", "Biology"]},
        {"subject": "General Awareness", "topics": ["Current Affairs", "History"]},
    ],
    "examPattern": {
        "numberOfPapers": 1,
        "totalQuestions": 100,
        "totalMarks": 100,
        "durationMinutes": 90,
        "negativeMarking": 0.25,
        "mode": "Online",
        "sections": [
            {"name": "Mathematics", "questions": 30, "marks": 30},
            {"name": "General Intelligence", "questions": 25, "marks": 25},
            {"name": "General Science", "questions": 25, "marks": 25},
            {"name": "General Awareness", "questions": 20, "marks": 20},
        ],
    },
    "requiredDocuments": [
        "Degree Certificate",
        "10th Marksheet",
        "Caste Certificate",
        "Date of Birth Certificate",
        "Photo ID",
        "Recent Passport Photo",
    ],
    "multipleJobs": False,
    "aiInsights": {
        "shortSummary": (
            "The Railway Recruitment Board has announced 7,951 vacancies for Junior Engineer (Civil) "
            "posts across India. Candidates with a B.E./B.Tech in Civil Engineering can apply online "
            "until 19 February 2024. Selection is through a Computer Based Test followed by document "
            "verification and a medical examination."
        ),
        "difficultyScore": 6,
        "competitionLevel": "Medium",
        "estimatedPreparationTime": "3–4 months",
        "recommendedStrategy": (
            "Focus on Mathematics and General Science which carry 55% weightage. Attempt at least "
            "2 full mock tests per week from 6 weeks before exam date."
        ),
    },
}

SAMPLE_NOTIFICATION = """RAILWAY RECRUITMENT BOARD
CENTRALISED EMPLOYMENT NOTIFICATION CEN RRB/2024/01
Dated: 15-01-2024

Recruitment of Junior Engineer (Civil) - 7951 posts
=============================================

Pay Level 6 (7th CPC), Rs. 35,400 - 1,12,400
Age: 18 to 33 years as on 01-01-2024

Application Fee: Rs. 500 for General/OBC, Rs. 250 for SC/ST/Female
Online applications open: 20-01-2024
Last date for submission: 19.02.2024

Selection: Computer Based Test, Document Verification, Medical Examination
"""


class FakeCompletionService(CompletionService):
    """Scripted completion service.

    Replies are consumed in order; the last one repeats once the script runs
    out. A reply may be a dict/list (sent as JSON), a string, a
    CompletionResult, an exception (raised), or a callable taking the user
    prompt and returning any of those.
    """

    def __init__(self, *replies, tokens_per_call=100):
        self.replies = list(replies)
        self.tokens_per_call = tokens_per_call
        self.calls: list[dict] = []

    async def complete(self, system_instruction, user_prompt, max_output_tokens):
        self.calls.append({
            "system_instruction": system_instruction,
            "user_prompt": user_prompt,
            "max_output_tokens": max_output_tokens,
        })
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if callable(reply):
            reply = reply(user_prompt)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, CompletionResult):
            return reply
        if isinstance(reply, (dict, list)):
            reply = json.dumps(reply)
        return CompletionResult(content=reply, tokens_used=self.tokens_per_call)


@pytest.fixture
def valid_job():
    """Fresh copy of a complete, valid extraction result (RRB JE 2024)."""
    return copy.deepcopy(VALID_JOB)


@pytest.fixture
def sample_notification():
    return SAMPLE_NOTIFICATION


@pytest.fixture
def fake_completion():
    """Factory: fake_completion(reply, ...) -> FakeCompletionService."""
    return FakeCompletionService
