"""Schéma initial.

Rôle (fonctionnel) :
- Crée les tables du centre de formation : classes, apprenants, formateurs, formations
  et la table d’association inscriptions (formation <-> apprenant).
- Pose les contraintes qui servent d’arbitre final :
  - unicité des emails (par type d’entité) et du numéro de salle,
  - 0 < capacite_min <= capacite_max,
  - colonnes version (verrouillage optimiste).

Revision ID: 5e2a1c7d9b40
Revises:
Create Date: 2026-10-19 09:12:44.218305
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Identifiants Alembic
revision: str = "5e2a1c7d9b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Application des changements de schéma."""
    op.create_table(
        "classes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nom", sa.String(length=50), nullable=False),
        sa.Column("num_salle", sa.String(length=10), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("num_salle"),
    )
    op.create_index(op.f("ix_classes_nom"), "classes", ["nom"], unique=False)

    op.create_table(
        "apprenants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nom", sa.String(length=100), nullable=False),
        sa.Column("prenom", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("niveau", sa.String(length=20), nullable=False),
        sa.Column("classe_id", sa.Integer(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["classe_id"], ["classes.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(op.f("ix_apprenants_nom"), "apprenants", ["nom"], unique=False)
    op.create_index(op.f("ix_apprenants_niveau"), "apprenants", ["niveau"], unique=False)
    op.create_index(op.f("ix_apprenants_classe_id"), "apprenants", ["classe_id"], unique=False)

    op.create_table(
        "formateurs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nom", sa.String(length=100), nullable=False),
        sa.Column("prenom", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("specialite", sa.String(length=150), nullable=False),
        sa.Column("classe_id", sa.Integer(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["classe_id"], ["classes.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(op.f("ix_formateurs_nom"), "formateurs", ["nom"], unique=False)
    op.create_index(op.f("ix_formateurs_specialite"), "formateurs", ["specialite"], unique=False)
    op.create_index(op.f("ix_formateurs_classe_id"), "formateurs", ["classe_id"], unique=False)

    op.create_table(
        "formations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("titre", sa.String(length=100), nullable=False),
        sa.Column("niveau", sa.String(length=20), nullable=False),
        sa.Column("prerequis", sa.Text(), nullable=True),
        sa.Column("capacite_min", sa.Integer(), nullable=False),
        sa.Column("capacite_max", sa.Integer(), nullable=False),
        sa.Column("date_debut", sa.DateTime(timezone=True), nullable=False),
        sa.Column("date_fin", sa.DateTime(timezone=True), nullable=False),
        sa.Column("statut", sa.String(length=20), nullable=False),
        sa.Column("formateur_id", sa.Integer(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("capacite_min > 0 AND capacite_min <= capacite_max", name="ck_formations_capacites"),
        sa.ForeignKeyConstraint(["formateur_id"], ["formateurs.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_formations_titre"), "formations", ["titre"], unique=False)
    op.create_index(op.f("ix_formations_formateur_id"), "formations", ["formateur_id"], unique=False)
    op.create_index("ix_formations_statut_date", "formations", ["statut", "date_debut"], unique=False)

    op.create_table(
        "inscriptions",
        sa.Column("formation_id", sa.Integer(), nullable=False),
        sa.Column("apprenant_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["apprenant_id"], ["apprenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["formation_id"], ["formations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("formation_id", "apprenant_id"),
    )
    op.create_index(op.f("ix_inscriptions_apprenant_id"), "inscriptions", ["apprenant_id"], unique=False)


def downgrade() -> None:
    """Retour arrière des changements de schéma."""
    op.drop_index(op.f("ix_inscriptions_apprenant_id"), table_name="inscriptions")
    op.drop_table("inscriptions")

    op.drop_index("ix_formations_statut_date", table_name="formations")
    op.drop_index(op.f("ix_formations_formateur_id"), table_name="formations")
    op.drop_index(op.f("ix_formations_titre"), table_name="formations")
    op.drop_table("formations")

    op.drop_index(op.f("ix_formateurs_classe_id"), table_name="formateurs")
    op.drop_index(op.f("ix_formateurs_specialite"), table_name="formateurs")
    op.drop_index(op.f("ix_formateurs_nom"), table_name="formateurs")
    op.drop_table("formateurs")

    op.drop_index(op.f("ix_apprenants_classe_id"), table_name="apprenants")
    op.drop_index(op.f("ix_apprenants_niveau"), table_name="apprenants")
    op.drop_index(op.f("ix_apprenants_nom"), table_name="apprenants")
    op.drop_table("apprenants")

    op.drop_index(op.f("ix_classes_nom"), table_name="classes")
    op.drop_table("classes")
