"""SheddomeAtlas: curated ectodomain shedding records and peptide mapping."""

__version__ = "0.1.0"
