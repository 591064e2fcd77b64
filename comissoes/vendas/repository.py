# comissoes/vendas/repository.py

"""
Contrato com o armazenamento de vendas. O motor não conhece banco: quem
hospeda o cálculo entrega uma implementação destes três métodos.
"""

from typing import Any, Dict, List, Optional, Protocol


class SaleRepository(Protocol):
    def fetch_sale(self, sale_id: str) -> Optional[Dict[str, Any]]:
        """Linha da venda (colunas como gravadas) ou None."""
        ...

    def fetch_installments(self, sale_id: str) -> List[Dict[str, Any]]:
        """Parcelas (boletos) da venda, cada uma com ao menos 'value'."""
        ...

    def save_snapshot(self, sale_id: str, record: Dict[str, Any]) -> None:
        """Grava o retrato final do cálculo aprovado, sobrescrevendo o anterior."""
        ...
