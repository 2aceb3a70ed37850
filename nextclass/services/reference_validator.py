"""Quality check for the references section of generated lecture material.

Material citing too many low-quality sites (school portals, wikis, video and Q&A
platforms) is rejected. Material without a recognizable references section is approved:
completions format that section in many ways and a missing one is not an error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

MAX_BANNED_REFERENCES = 5
MIN_SECTION_CHARS = 50

_SECTION_RES = (
  re.compile(r"##\s*(?:\d+\.)?\s*(?:Fontes e )?Refer[eê]ncias.*?\n\n(?P<body>.+?)\Z", re.DOTALL),
  re.compile(r"##\s*(?:\d+\.)?\s*Bibliograf[ií]a.*?\n\n(?P<body>.+?)\Z", re.DOTALL),
)
_REFERENCE_RE = re.compile(r"\[\d+\].+")

BANNED_DOMAINS = (
  "brasilescola.uol.com.br",
  "mundoeducacao.uol.com.br",
  "todamateria.com.br",
  "wikipedia.org",
  "infoescola.com",
  "soescola.com",
  "escolakids.uol.com.br",
  "educacao.uol.com.br",
  "blogspot.com",
  "wordpress.com",
  "uol.com.br/educacao",
  "youtube.com",
  "youtu.be",
  "facebook.com",
  "instagram.com",
  "quora.com",
  "answers.yahoo.com",
  "brainly.com.br",
  "passeiweb.com",
  "coladaweb.com",
  "suapesquisa.com",
)

ACADEMIC_DOMAINS = (
  ".edu",
  ".ac.uk",
  ".ac.br",
  ".gov",
  "scielo.org",
  "scielo.br",
  "journals.",
  "journal.",
  "pubmed",
  "ncbi.nlm.nih.gov",
  "springer.com",
  "springerlink.com",
  "elsevier.com",
  "sciencedirect.com",
  "wiley.com",
  "nature.com",
  "science.org",
  "researchgate.net",
  "academia.edu",
  "ieee.org",
  "acm.org",
  "doi.org",
)


@dataclass(frozen=True)
class ReferenceReport:
  valid: bool
  reference_count: int = 0
  banned_count: int = 0
  academic_percentage: float = 0.0
  errors: list[str] = field(default_factory=list)

  @property
  def rejection_message(self) -> str:
    return f"Material rejeitado: {self.banned_count} fontes não confiáveis (máx: {MAX_BANNED_REFERENCES})"


def find_reference_section(markdown: str) -> str:
  """Return the text after the references heading, or an empty string."""
  for pattern in _SECTION_RES:
    match = pattern.search(markdown)
    if match:
      return match.group("body")
  return ""


def validate_references(markdown: str) -> ReferenceReport:
  """Count banned and academic references; reject above MAX_BANNED_REFERENCES banned."""
  section = find_reference_section(markdown)
  if len(section.strip()) < MIN_SECTION_CHARS:
    logger.warning("No references section found in material; approving")
    return ReferenceReport(valid=True, errors=["Seção de referências não encontrada (aprovado por padrão)"])

  references = _REFERENCE_RE.findall(section)
  if not references:
    logger.warning("References section has no numbered entries; approving")
    return ReferenceReport(valid=True, errors=["Seção de referências encontrada mas formato não reconhecido (aprovado)"])

  banned = 0
  academic = 0
  errors: list[str] = []
  for position, reference in enumerate(references, start=1):
    if any(domain in reference for domain in BANNED_DOMAINS):
      banned += 1
      errors.append(f"Referência [{position}] é de fonte banida: {reference[:80]}...")
    if any(domain in reference for domain in ACADEMIC_DOMAINS):
      academic += 1

  valid = banned <= MAX_BANNED_REFERENCES
  if not valid:
    errors.append(f"REJECTED: {banned} fontes banidas (máx: {MAX_BANNED_REFERENCES})")
  percentage = academic * 100 / len(references)
  logger.info("References: %d/%d academic (%.0f%%), %d banned (max %d)", academic, len(references), percentage, banned, MAX_BANNED_REFERENCES)
  return ReferenceReport(valid=valid, reference_count=len(references), banned_count=banned, academic_percentage=percentage, errors=errors)
