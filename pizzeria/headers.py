"""Spreadsheet column titles → stable field names.

The sheets are maintained by hand in Portuguese, so each tab gets a table of
the titles seen so far. Anything not in the table is slugified, which keeps
the mapping total: a new column never breaks the menu, it just shows up
under a predictable name.
"""

import re
import unicodedata
from typing import Dict, List, Sequence

MENU_HEADERS = {
    "ID": "id",
    "ID Item": "id",
    "Nome do Item": "name",
    "Nome": "name",
    "Descrição": "description",
    "Descricao": "description",
    "Categoria": "category",
    "Imagem": "image",
    "URL da Imagem": "image",
    "Preço": "price",
    "Preco": "price",
    "Preço Broto": "price_small",
    "Preço Pequena": "price_small",
    "Preço Média": "price_medium",
    "Preço Grande": "price_large",
    "Preço Família": "price_family",
    "Preço 4 Fatias": "price_4_slices",
    "Preço 6 Fatias": "price_6_slices",
    "Preço 8 Fatias": "price_8_slices",
    "Preço 10 Fatias": "price_10_slices",
    "Disponível": "available",
    "Disponível (SIM/NÃO)": "available",
    "Disponivel (SIM/NAO)": "available",
    "É Pizza": "is_pizza",
    "E Pizza (SIM/NAO)": "is_pizza",
    "É Pizza (SIM/NÃO)": "is_pizza",
    "Personalizável": "is_customizable",
    "Personalizavel (SIM/NAO)": "is_customizable",
    "Personalizável (SIM/NÃO)": "is_customizable",
    "Escolha Única": "is_single_choice",
    "Escolha Unica (SIM/NAO)": "is_single_choice",
    "Obrigatório": "is_required",
    "Obrigatorio (SIM/NAO)": "is_required",
    "Limite": "limit",
    "Limite de Sabores": "limit",
    "Quantidade Máxima": "max_quantity",
    "Qtd Máxima": "max_quantity",
    "Quantidade Maxima": "max_quantity",
}

PROMOTION_HEADERS = {
    "ID": "id",
    "ID Promocao": "id",
    "ID Promoção": "id",
    "Nome da Promoção": "name",
    "Nome da Promocao": "name",
    "Nome": "name",
    "Descrição": "description",
    "Descricao": "description",
    "Imagem": "image",
    "Preço Original": "original_price",
    "Preço Promocional": "promo_price",
    "Preco Promocional": "promo_price",
    "ID Item Aplicável": "item_id",
    "ID Item Aplicavel": "item_id",
    "Ativo (SIM/NAO)": "active",
    "Ativo": "active",
    "Disponível": "available",
}

DELIVERY_FEE_HEADERS = {
    "Bairro": "neighborhood",
    "Bairros": "neighborhood",
    "Taxa": "delivery_fee",
    "Taxa de Entrega": "delivery_fee",
    "Valor": "delivery_fee",
}

INGREDIENT_HEADERS = {
    "Ingredientes": "name",
    "Ingrediente": "name",
    "valor": "price",
    "Valor": "price",
    "Preço": "price",
    "Disponível": "available",
}

CONTACT_HEADERS = {
    "Campo": "field",
    "Informação": "field",
    "Informacao": "field",
    "Valor": "value",
    "Dados": "value",
}

NOTIFICATION_HEADERS = {
    "ID Notificacao": "id",
    "ID Notificação": "id",
    "Titulo": "title",
    "Título": "title",
    "Mensagem": "message",
    "URL de Destino (Opcional)": "url",
    "URL de Destino": "url",
    "Ativo (SIM/NAO)": "active",
    "Ativo (SIM/NÃO)": "active",
    "Data de Criacao": "created_at",
    "Data de Criação": "created_at",
}


def _lookup_key(title: str) -> str:
    return re.sub(r"\s+", " ", title).strip().casefold()


def slugify(title: str) -> str:
    """Deterministic field name for a column we have no synonym for.

    'Observações Extras' → 'observacoes_extras'
    """
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    return re.sub(r"[^a-z0-9]+", "_", text).strip("_")


def map_headers(titles: Sequence[str], synonyms: Dict[str, str]) -> List[str]:
    """Map a sheet's header row to stable field names, one per column."""
    table = {_lookup_key(k): v for k, v in synonyms.items()}
    fields = []
    for i, title in enumerate(titles):
        name = table.get(_lookup_key(title)) or slugify(title)
        fields.append(name or f"column_{i + 1}")
    return fields
