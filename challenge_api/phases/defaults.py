"""Built-in phase catalog and timeline templates.

Seeds the in-memory catalog store and the ``phase_definitions`` /
``timeline_templates`` tables. Durations are in seconds.
"""

from typing import Any, Final

HOUR: Final = 60 * 60
DAY: Final = 24 * HOUR

REGISTRATION_ID: Final = "a93544bc-c165-4af4-b55e-18f3593b457a"
SUBMISSION_ID: Final = "6950164f-3c5e-4bdc-abc8-22aaf5a1bd49"
REVIEW_ID: Final = "aa5a3f78-79e0-4bf7-93ff-b11e8f5b398b"
APPEALS_ID: Final = "1c24cfb3-5b0a-4dbd-b6bd-4b0dff5349c6"
APPEALS_RESPONSE_ID: Final = "797a6af7-cd3f-4436-9fca-9679f773bee9"
ITERATIVE_REVIEW_ID: Final = "003a4b14-de5d-43fc-9e35-835dbeb6af1f"
CHECKPOINT_SUBMISSION_ID: Final = "d8a2cdbe-84d1-4687-ab75-78a6a7efdcc8"
CHECKPOINT_SCREENING_ID: Final = "ce1afb4c-74f9-496b-9e4b-087ae73ab032"
CHECKPOINT_REVIEW_ID: Final = "84b43897-2aab-44d6-a95a-42c433657eed"
SCREENING_ID: Final = "2d7d3d85-0b29-4989-b3b4-be7f2b1d0aa6"
APPROVAL_ID: Final = "ad985cff-ad3e-44de-b54e-3992505ba0ae"

DEVELOPMENT_TEMPLATE_ID: Final = "7ebf1c69-f62f-4d3a-bdfb-fe9ddb56861c"
FIRST_TO_FINISH_TEMPLATE_ID: Final = "0a0fed34-cb5a-47f5-b0cb-6e2ee7de8dcb"
DESIGN_CHECKPOINT_TEMPLATE_ID: Final = "d4201ca4-8437-4d63-9957-3f7708184b07"

DEFAULT_PHASE_DEFINITIONS: Final[list[dict[str, Any]]] = [
    {"id": REGISTRATION_ID, "name": "Registration", "description": "Members register for the challenge"},
    {"id": SUBMISSION_ID, "name": "Submission", "description": "Registrants upload their submissions"},
    {"id": REVIEW_ID, "name": "Review", "description": "Reviewers score the submissions"},
    {"id": APPEALS_ID, "name": "Appeals", "description": "Submitters appeal review scores"},
    {"id": APPEALS_RESPONSE_ID, "name": "Appeals Response", "description": "Reviewers answer appeals"},
    {
        "id": ITERATIVE_REVIEW_ID,
        "name": "Iterative Review",
        "description": "Each submission is reviewed as it arrives",
    },
    {
        "id": CHECKPOINT_SUBMISSION_ID,
        "name": "Checkpoint Submission",
        "description": "Registrants upload checkpoint submissions",
    },
    {
        "id": CHECKPOINT_SCREENING_ID,
        "name": "Checkpoint Screening",
        "description": "Checkpoint submissions are screened",
    },
    {
        "id": CHECKPOINT_REVIEW_ID,
        "name": "Checkpoint Review",
        "description": "Checkpoint submissions are reviewed",
    },
    {"id": SCREENING_ID, "name": "Screening", "description": "Final submissions are screened"},
    {"id": APPROVAL_ID, "name": "Approval", "description": "The copilot approves the winners"},
]

DEFAULT_TIMELINE_TEMPLATES: Final[list[dict[str, Any]]] = [
    {
        "id": DEVELOPMENT_TEMPLATE_ID,
        "name": "Standard Development",
        "description": "Registration, submission, review and appeals",
        "is_active": True,
        "phases": [
            {"phase_id": REGISTRATION_ID, "predecessor": None, "default_duration": 5 * DAY},
            {"phase_id": SUBMISSION_ID, "predecessor": None, "default_duration": 5 * DAY},
            {"phase_id": REVIEW_ID, "predecessor": SUBMISSION_ID, "default_duration": 2 * DAY},
            {"phase_id": APPEALS_ID, "predecessor": REVIEW_ID, "default_duration": DAY},
            {"phase_id": APPEALS_RESPONSE_ID, "predecessor": APPEALS_ID, "default_duration": 12 * HOUR},
        ],
    },
    {
        "id": FIRST_TO_FINISH_TEMPLATE_ID,
        "name": "First2Finish",
        "description": "First passing submission wins",
        "is_active": True,
        "phases": [
            {"phase_id": REGISTRATION_ID, "predecessor": None, "default_duration": 5 * DAY},
            {"phase_id": SUBMISSION_ID, "predecessor": None, "default_duration": 5 * DAY},
            {"phase_id": ITERATIVE_REVIEW_ID, "predecessor": SUBMISSION_ID, "default_duration": DAY},
        ],
    },
    {
        "id": DESIGN_CHECKPOINT_TEMPLATE_ID,
        "name": "Design with Checkpoint",
        "description": "Design challenge with a checkpoint round",
        "is_active": True,
        "phases": [
            {"phase_id": REGISTRATION_ID, "predecessor": None, "default_duration": 6 * DAY},
            {"phase_id": CHECKPOINT_SUBMISSION_ID, "predecessor": None, "default_duration": 3 * DAY},
            {
                "phase_id": CHECKPOINT_SCREENING_ID,
                "predecessor": CHECKPOINT_SUBMISSION_ID,
                "default_duration": 4 * HOUR,
            },
            {
                "phase_id": CHECKPOINT_REVIEW_ID,
                "predecessor": CHECKPOINT_SCREENING_ID,
                "default_duration": DAY,
            },
            {"phase_id": SUBMISSION_ID, "predecessor": CHECKPOINT_REVIEW_ID, "default_duration": 3 * DAY},
            {"phase_id": SCREENING_ID, "predecessor": SUBMISSION_ID, "default_duration": 4 * HOUR},
            {"phase_id": REVIEW_ID, "predecessor": SCREENING_ID, "default_duration": 2 * DAY},
            {"phase_id": APPROVAL_ID, "predecessor": REVIEW_ID, "default_duration": 5 * DAY},
        ],
    },
]
