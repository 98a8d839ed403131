"""FastAPI REST API exposing livasense analysis to editor hosts."""

from dataclasses import replace
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .config_store import SettingsStore
from .diagnostics import Diagnostic, violation_to_diagnostic
from .errors import (
    ConfigExistsError,
    DocumentNotFoundError,
    InvalidPositionError,
    InvalidSchemaVersionError,
    InvalidSettingsError,
    LivasenseError,
    UnsupportedLanguageError,
)
from .semantic import Span, Symbol, supported_languages
from .workspace import Workspace, analyze_text


# --- Pydantic Schemas ---


class SpanSchema(BaseModel):
    start_line: int
    start_character: int
    end_line: int
    end_character: int


class SymbolSchema(BaseModel):
    """A symbol in the document outline."""

    kind: str
    name: str
    label: str
    signature: str = ""
    declared_type: Optional[str] = None
    detail: str = ""
    span: SpanSchema
    selection_span: SpanSchema
    implements: list[str] = Field(default_factory=list)
    children: list["SymbolSchema"] = Field(default_factory=list)


SymbolSchema.model_rebuild()


class DiagnosticSchema(BaseModel):
    span: SpanSchema
    severity: str  # "error"|"warning"|"information"|"hint"
    message: str
    source: str


class AnalyzeRequest(BaseModel):
    """Request body for stateless analysis of a text snapshot."""

    text: str
    include_variables: Optional[bool] = Field(
        default=None, description="Override the include_variables setting"
    )


class AnalyzeResponse(BaseModel):
    outline: list[SymbolSchema]
    diagnostics: list[DiagnosticSchema]


class DocumentUpdateRequest(BaseModel):
    """Open a document, or replace the text of an open one."""

    uri: str
    text: str
    version: Optional[int] = Field(default=None, ge=0)


class DocumentSchema(BaseModel):
    uri: str
    version: int
    line_count: int


class DocumentListResponse(BaseModel):
    documents: list[DocumentSchema]
    count: int


class DocumentAnalysisResponse(BaseModel):
    uri: str
    version: int
    diagnostics: list[DiagnosticSchema]
    stale: bool = False


class OutlineResponse(BaseModel):
    uri: str
    outline: list[SymbolSchema]


class DiagnosticsResponse(BaseModel):
    uri: str
    diagnostics: list[DiagnosticSchema]


class PositionRequest(BaseModel):
    uri: str
    line: int = Field(..., ge=0, description="0-based line")
    character: int = Field(..., ge=0, description="0-based character")


class ReferencesRequest(PositionRequest):
    include_declaration: bool = True


class LocationsResponse(BaseModel):
    uri: str
    locations: list[SpanSchema]


class SignatureHelpResponse(BaseModel):
    label: Optional[str] = None
    parameters: list[str] = Field(default_factory=list)
    active_parameter: int = 0
    found: bool = False


# --- Helper Functions ---


_workspace: Optional[Workspace] = None


def get_workspace() -> Workspace:
    """Get the global Workspace, loading settings on first use."""
    global _workspace
    if _workspace is None:
        _workspace = Workspace(SettingsStore().load())
    return _workspace


def span_to_schema(span: Span) -> SpanSchema:
    return SpanSchema(**span.to_dict())


def symbol_to_schema(symbol: Symbol) -> SymbolSchema:
    """Convert a Symbol (and its members) to the outline schema."""
    return SymbolSchema(
        kind=symbol.kind.value,
        name=symbol.name,
        label=symbol.label,
        signature=symbol.signature,
        declared_type=symbol.declared_type,
        detail=symbol.detail,
        span=span_to_schema(symbol.span),
        selection_span=span_to_schema(symbol.selection_span),
        implements=list(getattr(symbol, "implements", [])),
        children=[symbol_to_schema(m) for m in getattr(symbol, "members", [])],
    )


def diagnostic_to_schema(diagnostic: Diagnostic) -> DiagnosticSchema:
    return DiagnosticSchema(
        span=span_to_schema(diagnostic.span),
        severity=diagnostic.severity.value,
        message=diagnostic.message,
        source=diagnostic.source,
    )


# --- App ---


app = FastAPI(
    title="livasense API",
    description="Outline, interface conformance and name resolution for Liva documents",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Global Exception Handler ---


# Map exception types to HTTP status codes
ERROR_STATUS_CODES: dict[type, int] = {
    DocumentNotFoundError: 404,
    InvalidPositionError: 400,
    UnsupportedLanguageError: 400,
    InvalidSettingsError: 400,
    ConfigExistsError: 409,
    InvalidSchemaVersionError: 500,
}


@app.exception_handler(LivasenseError)
async def livasense_error_handler(request: Request, exc: LivasenseError) -> JSONResponse:
    """Map LivasenseError subclasses to appropriate HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )


# --- Endpoints ---


@app.get("/api/health")
def health_check():
    """Basic service status."""
    workspace = get_workspace()
    return {
        "status": "ok",
        "version": __version__,
        "document_count": len(workspace.list_documents()),
        "languages": supported_languages(),
    }


@app.post("/api/analyze", response_model=AnalyzeResponse)
def analyze(request: AnalyzeRequest):
    """
    Analyze a text snapshot without opening it.

    Returns the outline and the interface conformance diagnostics.
    """
    settings = get_workspace().settings
    if request.include_variables is not None:
        settings = replace(settings, include_variables=request.include_variables)

    model, violations = analyze_text(request.text, settings)
    return AnalyzeResponse(
        outline=[symbol_to_schema(s) for s in model],
        diagnostics=[diagnostic_to_schema(violation_to_diagnostic(v)) for v in violations],
    )


# --- Document Endpoints ---


@app.get("/api/documents", response_model=DocumentListResponse)
def list_documents():
    documents = get_workspace().list_documents()
    return DocumentListResponse(
        documents=[
            DocumentSchema(uri=d.uri, version=d.version, line_count=len(d.lines))
            for d in documents
        ],
        count=len(documents),
    )


@app.put("/api/documents", response_model=DocumentAnalysisResponse)
def update_document(request: DocumentUpdateRequest):
    """
    Open or change a document and analyze it immediately.

    Debouncing is left to the caller; each request is one analysis pass.
    """
    workspace = get_workspace()
    doc = workspace.update(request.uri, request.text, request.version)
    analysis = workspace.analyze(doc.uri)
    if analysis is None:
        return DocumentAnalysisResponse(uri=doc.uri, version=doc.version, diagnostics=[], stale=True)
    return DocumentAnalysisResponse(
        uri=analysis.uri,
        version=analysis.version,
        diagnostics=[diagnostic_to_schema(d) for d in analysis.diagnostics],
    )


@app.delete("/api/documents", response_model=DocumentSchema)
def close_document(uri: str = Query(..., description="Document URI")):
    workspace = get_workspace()
    doc = workspace.get(uri)
    workspace.close(uri)
    return DocumentSchema(uri=doc.uri, version=doc.version, line_count=len(doc.lines))


@app.get("/api/documents/outline", response_model=OutlineResponse)
def get_outline(uri: str = Query(..., description="Document URI")):
    model = get_workspace().outline(uri)
    return OutlineResponse(uri=uri, outline=[symbol_to_schema(s) for s in model])


@app.get("/api/documents/diagnostics", response_model=DiagnosticsResponse)
def get_diagnostics(uri: str = Query(..., description="Document URI")):
    workspace = get_workspace()
    workspace.get(uri)
    return DiagnosticsResponse(
        uri=uri,
        diagnostics=[diagnostic_to_schema(d) for d in workspace.diagnostics.get(uri)],
    )


# --- Navigation Endpoints ---


@app.post("/api/definition", response_model=LocationsResponse)
def definition(request: PositionRequest):
    """All definition sites of the word at the position; the first is the go-to target."""
    spans = get_workspace().definition(request.uri, request.line, request.character)
    return LocationsResponse(uri=request.uri, locations=[span_to_schema(s) for s in spans])


@app.post("/api/references", response_model=LocationsResponse)
def references(request: ReferencesRequest):
    spans = get_workspace().references(
        request.uri, request.line, request.character, request.include_declaration
    )
    return LocationsResponse(uri=request.uri, locations=[span_to_schema(s) for s in spans])


@app.post("/api/signature-help", response_model=SignatureHelpResponse)
def get_signature_help(request: PositionRequest):
    help_ = get_workspace().signature_help(request.uri, request.line, request.character)
    if help_ is None:
        return SignatureHelpResponse()
    return SignatureHelpResponse(
        label=help_.label,
        parameters=help_.parameters,
        active_parameter=help_.active_parameter,
        found=True,
    )
