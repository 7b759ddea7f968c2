"""
Ponto de entrada da API do PDV

    uvicorn main:create_app --factory
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from database.conexion import LedgerStorage
from endpoints import caixa, financeiro, hospedes, pedidos, produtos, quartos, usuarios
from services import Servicos
from utils.erros import AppError
from utils.logging_utils import log_exception, log_warning
from utils.notificador import Notificador


def create_app(storage: Optional[LedgerStorage] = None, notificador: Optional[Notificador] = None) -> FastAPI:
    """Monta a aplicação: storage explícito, grafo de serviços e rotas"""
    storage = storage or LedgerStorage()
    storage.create_all()

    app = FastAPI(title="PDV Hotel")
    app.state.storage = storage
    app.state.servicos = Servicos(notificador)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log_warning("api", f"{request.method} {request.url.path} -> {exc.codigo}: {exc.mensagem}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        primeiro = exc.errors()[0] if exc.errors() else {}
        campo = ".".join(str(p) for p in primeiro.get("loc", ()) if p != "body")
        mensagem = f"{campo}: {primeiro.get('msg', 'dados inválidos')}" if campo else primeiro.get("msg", "Dados inválidos")
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": mensagem, "code": "VALIDATION_ERROR"},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        log_exception("api", f"Erro inesperado em {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Erro interno do servidor", "code": "INTERNAL_ERROR"},
        )

    app.include_router(usuarios.router)
    app.include_router(quartos.router)
    app.include_router(produtos.router)
    app.include_router(produtos.estoque_router)
    app.include_router(pedidos.router)
    app.include_router(hospedes.router)
    app.include_router(caixa.router)
    app.include_router(financeiro.router)

    @app.get("/")
    def read_root():
        return {"message": "PDV Hotel em execução"}

    return app

