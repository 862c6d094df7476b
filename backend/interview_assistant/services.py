from core.config import SCORING_SEED, STATE_STORE_PATH
from interview_assistant.export.mailer import EmailSender
from interview_assistant.interview.engine import InterviewController
from interview_assistant.interview.evaluator import RandomScoringPolicy
from interview_assistant.session_controller import SessionController
from interview_assistant.storage.state_store import JsonFileStateStore


controller = InterviewController(
    store=JsonFileStateStore(STATE_STORE_PATH),
    scoring_policy=RandomScoringPolicy(seed=SCORING_SEED),
)
session_controller = SessionController(controller)
email_sender = EmailSender()
