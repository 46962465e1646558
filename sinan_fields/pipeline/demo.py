from __future__ import annotations

from ..models import (
    Descriptive,
    FieldSpec,
    Form,
    FormRow,
    LegendWithAnswer,
    MultipleChoice,
    OtherField,
)


DEMO_TITLE = "Relatório Exemplo"

SINTOMAS = [
    "Febre",
    "Cefaléia",
    "Dor Abdominal",
    "Mialgia",
    "Náusea/Vômito",
    "Exantema",
    "Diarréia",
    "Icterícia",
    "Hiperemia Conjuntival",
    "Hepatomegalia/Esplenomegalia",
    "Petéquias",
    "Manifestações hemorrágicas",
    "Linfadenopatia",
    "Convulsão",
    "Necrose de extremidades",
    "Prostração",
    "Choque/Hipotensão",
    "Estupor/Coma",
    "Sufusão hemorrágica",
    "Alterações Respiratórias",
    "Oligúria/Anúria",
]

# 1 = Sim, 2 = Não, 9 = Ignorado, "" = não preenchido
RESPOSTAS_SINTOMAS = [
    "1", "2", "1", "9", "", "2", "1", "2", "", "9", "2",
    "2", "", "2", "2", "1", "2", "2", "2", "1", "2",
]

EXAMES = ["Hemograma", "Bioquímica", "Sorologia", "PCR", "Cultura", "Imagem"]
RESULTADOS = ["Positivo", "Negativo", "Inconclusivo", "Aguardando"]


def demo_form() -> Form:
    telefone = FieldSpec("28", "(DDD) Telefone", Descriptive("(11) 99999-9999"))
    zona = FieldSpec(
        "29",
        "Zona",
        LegendWithAnswer(("1 - Urbana    2 - Rural", "3 - Periurbana  9 - Ignorado"), answer="1"),
    )
    pais = FieldSpec("30", "País (se residente fora do Brasil)", Descriptive(""))

    ocupacao = FieldSpec(
        "32",
        "Ocupação",
        Descriptive(
            "Engenheiro de Software - Desenvolvedor Full Stack com experiência em "
            "sistemas distribuídos, microserviços e arquiteturas cloud-native. "
            "Especializado em Java, Spring Boot e tecnologias de containerização.",
            min_height=40.0,
        ),
    )

    sintomas = FieldSpec(
        "33",
        "Sinais e Sintomas",
        MultipleChoice.from_lists(
            "1 - Sim    2 - Não    9 - Ignorado",
            SINTOMAS,
            RESPOSTAS_SINTOMAS,
            columns=4,
            other=OtherField("Tosse seca persistente"),
        ),
    )

    exames = FieldSpec(
        "34",
        "Exames Solicitados",
        MultipleChoice.from_lists(
            "1 - Sim  2 - Não  9 - Ignorado",
            EXAMES,
            ["1", "1", "2", "1", "9", "2"],
            columns=2,
        ),
    )
    resultado = FieldSpec(
        "35",
        "Resultado",
        MultipleChoice.from_lists("1 - Marcar opção", RESULTADOS, ["", "1"], columns=2),
    )

    return Form(
        title=DEMO_TITLE,
        rows=(
            FormRow((telefone, zona, pais), widths=(30.0, 25.0, 45.0)),
            FormRow((ocupacao,)),
            FormRow((sintomas,)),
            FormRow((exames, resultado), widths=(50.0, 50.0)),
        ),
    )
