import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from core.config import settings
from routers.auth_router import router as auth_router
from routers.empresa_router import router as empresa_router
from routers.lote_router import router as lote_router
from routers.peca_router import router as peca_router
from routers.assinatura_router import router as assinatura_router
from routers.pagamento_router import router as pagamento_router
from routers.cotacao_router import router as cotacao_router
from routers.analytics_router import router as analytics_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="""
API do Xtagy para banhos de joias e seus clientes.

Fluxo:
1. Cadastro da empresa (banho ou cliente)
2. Assinatura do banho (pagamento ou trial)
3. Abertura de lotes e cadastro de peças com custo calculado
4. Etiquetas com QR code e vínculo do cliente pelo código de acesso
""",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Captura exceções não tratadas para que a resposta 500
    passe pelo CORSMiddleware e inclua os headers corretos."""
    logger.exception("Erro não tratado em %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": f"Erro interno do servidor: {str(exc)}"},
    )


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok", "ambiente": settings.AMBIENTE}


app.include_router(auth_router, prefix="/api")
app.include_router(empresa_router, prefix="/api")
app.include_router(lote_router, prefix="/api")
app.include_router(peca_router, prefix="/api")
app.include_router(assinatura_router, prefix="/api")
app.include_router(pagamento_router, prefix="/api")
app.include_router(cotacao_router, prefix="/api")
app.include_router(analytics_router, prefix="/api")
