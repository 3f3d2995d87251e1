"""
Quiz Answer Service - FastAPI Server
Answers one quiz question at a time using a chat-completion model.
"""

import logging
from typing import List

from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from dotenv import load_dotenv

from quizhelper.api_utils import ChatCompletionClient
from quizhelper.config import Settings
from quizhelper.errors import QuizHelperError
from quizhelper.extractor import QuestionExtractor
from quizhelper.models import AnswerRequest
from quizhelper.page import HtmlPage

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

settings = Settings.from_env(dotenv=False)

app = FastAPI(
    title="Quiz Answer Service",
    description="Answers quiz questions, choosing from the given options when there are any",
    version="1.0.0"
)

# Called from quiz pages in the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class AnswerResponse(BaseModel):
    """Response model for the answer endpoint."""
    answer: str


class QuestionsRequest(BaseModel):
    """Request model for extracting questions from an HTML document."""
    html: str


class QuestionsResponse(BaseModel):
    """Response model for extracted questions."""
    count: int
    questions: List[dict]


def get_chat_client() -> ChatCompletionClient:
    return ChatCompletionClient(
        api_key=settings.openai_api_key,
        api_url=settings.openai_api_url,
        model=settings.openai_model,
    )


@app.post("/getAnswer", response_model=AnswerResponse)
def get_answer(request: AnswerRequest, client: ChatCompletionClient = Depends(get_chat_client)):
    """
    Answer one question.

    - Returns 400 if both stem and options are empty
    - Returns 500 if the model fails or returns nothing
    - Returns 200 { "answer": "..." } otherwise
    """
    if request.is_empty:
        raise HTTPException(status_code=400, detail="Question stem or options are required")

    logger.info(f"Received question stem: {request.stem}")
    logger.info(f"Received options: {request.options}")

    try:
        answer = client.complete(request.stem, request.options)
    except QuizHelperError as e:
        logger.error(f"Error calling chat completion API: {e}")
        raise HTTPException(status_code=500, detail="Error processing request")

    if not answer:
        logger.warning("No answer received from the model")
        raise HTTPException(status_code=500, detail="Could not get answer from AI")

    logger.info(f"Sending answer: {answer}")
    return AnswerResponse(answer=answer)


@app.post("/questions", response_model=QuestionsResponse)
async def extract_questions(request: QuestionsRequest):
    """Extract quiz questions from a rendered HTML document."""
    questions = await QuestionExtractor().extract(HtmlPage(request.html))
    return QuestionsResponse(count=len(questions), questions=[q.to_dict() for q in questions])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    """Handle request body validation errors."""
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid JSON body"}
    )


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Answer service listening on http://localhost:{settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
