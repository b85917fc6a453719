"""
scripts

Scripts exécutables (CLI) liés au projet : génération de données de démo.

Les scripts n’embarquent pas de règles métier : ils s’appuient sur les modules de `app/`.
"""
