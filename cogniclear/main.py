"""
Main API module defining the FastAPI application and its endpoints.
"""

import csv
import logging
from io import StringIO

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from cogniclear.analyzer import analyze_decision_bias
from cogniclear.exceptions import AnalysisError, MissingCredentialError
from cogniclear.models.analysis import INITIAL_RESULT, AnalysisResult
from cogniclear.models.decision import Decision, ScenarioContext
from cogniclear.settings import Settings, get_settings

logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Rate limiter configuration
limiter = Limiter(key_func=get_remote_address)

ANALYSIS_FAILED = "Analysis failed. Please check your API key and connection."

PRESET_SCENARIOS = [
    {
        "label": "Hiring Decision",
        "text": "I interviewed John today. He went to the same university as me, which means he clearly has a good educational foundation. He seemed a bit nervous during the technical questions, but I think he's just a 'big picture' thinker like myself. The other candidate had better test scores, but didn't have that 'spark' or culture fit. I'm going to recommend hiring John.",
    },
    {
        "label": "Project Investment",
        "text": "We've already spent $2 million on Project X over the last 3 years. Even though the market research shows user interest is declining, we can't just throw away that investment. If we put in another $500k, we can probably turn it around. Quitting now would be a total waste of the budget we've already used.",
    },
    {
        "label": "Price Setting",
        "text": "Our competitor launched their product at $50. I think we should price ours at $45 to undercut them. It feels like the right number. I haven't looked at our unit economics in detail yet, but $45 seems close enough to their price to be competitive but cheaper.",
    },
]

TEXT_COLUMNS = ["decision", "text", "content", "narrative", "body"]

app = FastAPI()

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _serialize(result: AnalysisResult) -> dict:
    return result.model_dump(by_alias=True)


async def _run_analysis(
    text: str, context: ScenarioContext, settings: Settings
) -> AnalysisResult:
    try:
        return await analyze_decision_bias(text, context, settings=settings)
    except MissingCredentialError as e:
        logger.error("Analysis requested without credentials: %s", e)
        raise HTTPException(
            status_code=500,
            detail="Analysis service is not configured. Set OLLAMA_API_KEY.",
        )
    except AnalysisError as e:
        logger.error("Analysis failed: %s", e)
        raise HTTPException(status_code=503, detail=ANALYSIS_FAILED)


@app.get("/")
@limiter.limit("60/minute")
async def root(request: Request):
    """
    Root endpoint returning a simple status message.
    """
    return {"message": "CogniClear bias audit service is running"}


@app.get("/contexts/")
@limiter.limit("60/minute")
async def list_contexts(request: Request):
    """
    Endpoint listing the situational contexts a decision can be analysed under.
    """
    return {"contexts": [context.value for context in ScenarioContext]}


@app.get("/scenarios/")
@limiter.limit("60/minute")
async def list_scenarios(request: Request):
    """
    Endpoint returning preset decision narratives for trying the audit.
    """
    return {"scenarios": PRESET_SCENARIOS}


@app.get("/analysis/initial")
@limiter.limit("60/minute")
async def initial_analysis(request: Request):
    """
    Placeholder analysis shown before any decision has been submitted.
    """
    return _serialize(INITIAL_RESULT)


@app.post("/analyze/")
@limiter.limit("10/minute")
async def analyze_decision(
    request: Request,
    decision: Decision,
    settings: Settings = Depends(get_settings),
):
    """
    Endpoint to audit a decision narrative for cognitive biases.

    A reply the model garbles comes back as the error placeholder analysis
    rather than as an HTTP error; only service and configuration failures
    produce error statuses.
    """

    text = decision.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="No decision text provided")

    result = await _run_analysis(text, decision.context, settings)

    return {
        "text": text,
        "context": decision.context.value,
        "analysis": _serialize(result),
        "score_band": result.score_band,
        "status": (
            "Analysis could not be parsed"
            if result.is_fallback
            else "Analysis completed successfully"
        ),
    }


@app.post("/upload/")
@limiter.limit("5/minute")
async def analyze_csv(
    request: Request,
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
):
    """
    Endpoint to audit every decision narrative in a CSV file.

    An optional ``context`` column selects the situational context per row.
    """

    if not file.filename.endswith(".csv"):
        raise HTTPException(
            status_code=400, detail="Invalid file type. Please upload a CSV file."
        )

    content = await file.read()

    try:
        text_content = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=400, detail="Invalid file encoding. Please use UTF-8."
        )

    reader = csv.DictReader(StringIO(text_content))
    fieldnames = reader.fieldnames

    if not fieldnames:
        raise HTTPException(status_code=400, detail="Empty CSV file")

    text_field = next(
        (name for name in fieldnames if name.lower() in TEXT_COLUMNS),
        fieldnames[0],
    )
    context_field = next(
        (name for name in fieldnames if name.lower() == "context"), None
    )

    rows = []
    try:
        for row in reader:
            text = (row.get(text_field) or "").strip()
            if not text:
                continue
            raw_context = (row.get(context_field) or "").strip() if context_field else ""
            context = ScenarioContext(raw_context) if raw_context else ScenarioContext.NONE
            rows.append((text, context))
    except (ValueError, csv.Error) as e:
        raise HTTPException(status_code=400, detail=f"Error parsing CSV: {str(e)}")

    logger.info("Analysing %d decision(s) from %s", len(rows), file.filename)

    results = []
    for text, context in rows:
        result = await _run_analysis(text, context, settings)
        results.append(
            {
                "text": text,
                "context": context.value,
                "analysis": _serialize(result),
                "score_band": result.score_band,
            }
        )

    return {
        "filename": file.filename,
        "results": results,
        "status": "CSV analyzed successfully",
    }
