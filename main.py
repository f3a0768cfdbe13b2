import io
from fastapi import FastAPI, File, UploadFile, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pathlib import Path
from pydantic import BaseModel
import pandas as pd
from loguru import logger

from config import Config
from gst_compliance.assistant import GSTAssistant
from gst_compliance.business_analyzer import EmptyDatasetError
from gst_compliance.compliance_agent import TaxComplianceAgent
from gst_compliance.compliance_planner import upcoming_deadlines
from gst_compliance.filing_store import Filing, FilingStore, FilingNotFoundError
from gst_compliance.knowledge_retriever import KnowledgeRetriever
from gst_compliance.text_generator import build_text_generator


# setup FastAPI
app = FastAPI(
    title=Config.API_TITLE,
    version=Config.API_VERSION,
    description="""
## Vyapar Sahayak: GST Compliance Assistant v1.0

Upload a CSV of sales and get:
- ✅ GST liability split into CGST / SGST / IGST
- ✅ Business analysis and compliance risk
- ✅ Compliance plan, checklist and payment instructions
- ✅ Answers to GST questions from the knowledge base

### Upload Rules:
- CSV only, with columns `amount`, `taxRate`, `state`, `product`
- `state` = "Home State" marks an intra-state sale
    """,
    docs_url="/docs",
    redoc_url="/redoc",
)

# add CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class QuestionRequest(BaseModel):
    question: str = ""


# initialize services
filing_store = FilingStore()

try:
    text_generator = build_text_generator(Config)

    knowledge_retriever = KnowledgeRetriever.from_directory(Config.KNOWLEDGE_DIR)

    tax_agent = TaxComplianceAgent(
        retriever=knowledge_retriever,
        text_generator=text_generator,
        max_results=Config.MAX_RESULTS
    )

    assistant = GSTAssistant(
        retriever=knowledge_retriever,
        text_generator=text_generator,
        max_results=Config.MAX_RESULTS
    )

    logger.success("All services initialized")

except Exception as e:
    logger.error(f"Failed to init services: {str(e)}")
    text_generator = None
    knowledge_retriever = None
    tax_agent = None
    assistant = None


@app.on_event("startup")
async def startup_event():
    """startup handler"""
    logger.info("=" * 60)
    logger.info(f"Vyapar Sahayak GST Compliance v{Config.API_VERSION} - Starting")
    if text_generator is not None:
        logger.info(f"Text generation: {text_generator.name}")
    if knowledge_retriever is not None:
        logger.info(f"Knowledge base: {len(knowledge_retriever.documents)} documents")
    logger.info("=" * 60)

    is_valid = Config.validate_configuration()
    if not is_valid:
        logger.error("Config validation failed!")
    else:
        logger.success("Config validated")


@app.on_event("shutdown")
async def shutdown_event():
    """shutdown handler"""
    filing_store.clear()
    logger.info("Vyapar Sahayak - Shutting Down")


@app.get("/")
def root():
    """root endpoint"""
    return {
        "message": "Vyapar Sahayak: GST Compliance Assistant v1.0",
        "version": Config.API_VERSION,
        "status": "operational",
        "features": {
            "text_generation": text_generator.name if text_generator else None,
            "knowledge_documents": len(knowledge_retriever.documents) if knowledge_retriever else 0,
        },
        "endpoints": {
            "upload": "POST /api/upload",
            "filings": "GET /api/filings",
            "filing": "GET /api/filing/{filing_id}",
            "assistant": "POST /api/assistant",
            "deadlines": "GET /api/deadlines",
            "health": "GET /health",
        },
    }


@app.get("/health")
def health_check():
    """health check"""
    try:
        health_status = {
            "status": "healthy",
            "services": {
                "text_generator": text_generator is not None,
                "knowledge_retriever": knowledge_retriever is not None,
                "tax_agent": tax_agent is not None,
                "assistant": assistant is not None,
            },
            "filings": len(filing_store),
        }

        if not all(health_status["services"].values()):
            health_status["status"] = "degraded"

        if knowledge_retriever is not None:
            health_status["knowledge_base"] = knowledge_retriever.get_statistics()

        return health_status

    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return JSONResponse(
            status_code=500,
            content={"status": "unhealthy", "error": str(e)}
        )


def parse_csv_rows(content):
    """decode CSV bytes into a list of string-keyed rows"""
    if not content or not content.strip():
        return []
    n_cols = len(pd.read_csv(io.BytesIO(content), nrows=0).columns)
    # overlong rows keep their first n_cols cells
    df = pd.read_csv(
        io.BytesIO(content),
        dtype=str,
        keep_default_na=False,
        skipinitialspace=True,
        engine="python",
        on_bad_lines=lambda line: line[:n_cols],
    )
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient="records")


def is_csv_upload(upload):
    suffix = Path(upload.filename or "").suffix.lower()
    return suffix in Config.ALLOWED_EXTENSIONS or upload.content_type == "text/csv"


@app.post(
    "/api/upload",
    summary="Upload sales CSV",
    description="Calculate GST, analyze the business and build a compliance plan",
    tags=["Filings"]
)
async def upload_sales(file: UploadFile = File(...)):
    """process an uploaded sales CSV into a filing"""
    logger.info("=" * 60)
    logger.info(f"NEW UPLOAD - {file.filename}")
    logger.info("=" * 60)

    try:
        if tax_agent is None:
            raise HTTPException(status_code=500, detail="Services not initialized")

        if not is_csv_upload(file):
            raise HTTPException(status_code=400, detail="Only CSV files are supported. Please upload a CSV file.")

        content = await file.read()
        try:
            rows = parse_csv_rows(content)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            logger.warning(f"Could not parse {file.filename}: {str(e)}")
            raise HTTPException(status_code=400, detail=f"Could not parse CSV: {str(e)}")

        try:
            result = await run_in_threadpool(tax_agent.process_business_data, rows)
        except EmptyDatasetError as e:
            logger.warning(f"Empty upload: {file.filename}")
            raise HTTPException(status_code=400, detail=str(e))

        filing = Filing(
            id=filing_store.next_id(),
            file_name=file.filename,
            sales_data=result.records,
            tax_calculation=result.tax_calculation,
            business_analysis=result.business_analysis,
            compliance_plan=result.compliance_plan,
            documents=result.documents,
        )
        filing_store.add(filing)

        logger.success(f"UPLOAD COMPLETED - filing {filing.id}")

        return {
            "success": True,
            "message": "File processed successfully",
            "filing": {
                "id": filing.id,
                "created_at": filing.created_at.isoformat(),
                "file_name": filing.file_name,
                "summary": filing.tax_calculation.to_dict(),
                "business_analysis": filing.business_analysis.to_dict(),
                "compliance_plan": filing.compliance_plan.to_dict(),
                "documents": [d.to_dict() for d in filing.documents],
            },
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error processing file: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to process file")


@app.get("/api/filings", tags=["Filings"])
def list_filings():
    """all filings, summary only"""
    return {
        "success": True,
        "filings": [f.summary() for f in filing_store.list_filings()],
    }


@app.get("/api/filing/{filing_id}", tags=["Filings"])
def get_filing(filing_id: int):
    """full filing by id"""
    try:
        filing = filing_store.get(filing_id)
    except FilingNotFoundError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=404, detail="Filing not found")

    return {"success": True, "filing": filing.to_dict()}


@app.post("/api/assistant", tags=["Assistant"])
async def ask_assistant(request: QuestionRequest):
    """answer a GST question"""
    try:
        if assistant is None:
            raise HTTPException(status_code=500, detail="Services not initialized")

        if not request.question.strip():
            raise HTTPException(status_code=400, detail="Question is required")

        exchange = await run_in_threadpool(assistant.answer, request.question, filing_store.latest())
        filing_store.add_question(exchange)

        return {
            "success": True,
            "answer": exchange.answer,
            "sources": exchange.sources,
            "generated": exchange.generated,
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error processing question: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to process question")


@app.get("/api/assistant/history", tags=["Assistant"])
def question_history():
    """questions asked so far"""
    return {
        "success": True,
        "questions": [q.to_dict() for q in filing_store.list_questions()],
    }


@app.get("/api/deadlines", tags=["Compliance"])
def get_deadlines():
    """upcoming statutory deadlines"""
    return {"success": True, "deadlines": upcoming_deadlines()}


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Vyapar Sahayak server...")
    uvicorn.run(
        app,
        host=Config.API_HOST,
        port=Config.API_PORT,
        log_level="info"
    )
