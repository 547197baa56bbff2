from .empresa_schema import (
    AssinaturaOut,
    FaturamentoOut,
    EmpresaResumo,
    EmpresaOut,
)

from .auth_schema import (
    RegistroRequest,
    UsuarioOut,
    UserMe,
)

from .lote_schema import (
    LoteCreate,
    VincularLoteRequest,
    AtualizarStatusLoteRequest,
    LoteOut,
)

from .peca_schema import (
    PecaCreate,
    EtiquetaSnapshot,
    ImprimirEtiquetaRequest,
    ScanRequest,
    PecaOut,
    PecaDetalheOut,
)

from .pagamento_schema import (
    PaymentIntentRequest,
    PaymentIntentResponse,
    WebhookAck,
)

from .cotacao_schema import CotacaoOuroOut

from .analytics_schema import (
    EstatisticasOperacao,
    GraficoMensal,
    AnalyticsResponse,
)
