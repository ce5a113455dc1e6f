from recallscan.orchestrator.contracts import DisambiguationPrompt, ObjectIdentity, RecallRecord

NOT_SPECIFIED = "Not specified"

# Label status lines shown under the object name
LABEL_NOT_RECALLED = "Not Recalled"
LABEL_RECALLED = "Recalled!"

NOTICE_FAILED = "Couldn't check this item right now. Tap to try again."

IDENTIFY_INSTRUCTION = (
    "Identify and return the following in JSON format considering the object "
    "visible in the camera view, 'objectName' (provide in format Brand - Object Name)"
)


def _recall_context(record: RecallRecord, identity: ObjectIdentity) -> str:
    return (
        f"{identity.name} has been recalled for the reason: {record.reason or NOT_SPECIFIED}, "
        f"the piece of information that identifies this recall is {record.identifying_info or NOT_SPECIFIED}."
    )


def disambiguation_instruction(record: RecallRecord, identity: ObjectIdentity) -> str:
    return (
        f"{_recall_context(record, identity)} Create a prompt for an user to provide the product "
        "information to see if their product is recalled via keyboard. One sentence only"
    )


def adjudication_instruction(record: RecallRecord, identity: ObjectIdentity, user_answer: str,
                             prompt: DisambiguationPrompt | None = None) -> str:
    prompt_text = prompt.text if prompt is not None else NOT_SPECIFIED
    return (
        f"{_recall_context(record, identity)} The user responded to the prompt {prompt_text} "
        f"with: {user_answer}. Is the product that the user owns part of the recall? (yes or no), "
        "if the user's response does not make sense return no."
    )
