"""
Screens of the ward client and the menu each role sees.

The client drives its navigation from the payload of ``GET /api/menu``;
the order of each list below is the order of the main-menu buttons.
"""
from django.db import models


class AppView(models.TextChoices):
    LOGIN = 'LOGIN', 'Login'
    UNIT_SELECTION = 'UNIT_SELECTION', 'Seleção de unidade'
    MAIN_MENU = 'MAIN_MENU', 'Menu principal'
    NEW_PATIENT = 'NEW_PATIENT', 'Novo paciente'
    PATIENT_LIST = 'PATIENT_LIST', 'Pacientes'
    DASHBOARD = 'DASHBOARD', 'Painel'
    INITIATE_TRANSFER = 'INITIATE_TRANSFER', 'Iniciar transferência'
    TRANSFERS = 'TRANSFERS', 'Transferências'
    FINALIZED_PATIENTS = 'FINALIZED_PATIENTS', 'Finalizados'
    PENDENCIES = 'PENDENCIES', 'Pendências'
    CLEAR_DATA = 'CLEAR_DATA', 'Limpar dados'
    COLLABORATORS = 'COLLABORATORS', 'Equipe'
    CLINICAL_DECISION = 'CLINICAL_DECISION', 'Decisão clínica'
    LEAN_MENU = 'LEAN_MENU', 'Monitoramento Lean'
    LEAN_CADASTRO = 'LEAN_CADASTRO', 'Cadastro Lean'
    LEAN_LIST = 'LEAN_LIST', 'Lista Lean'
    LEAN_NURSE_SUMMARY = 'LEAN_NURSE_SUMMARY', 'Resumo Lean'
    ABOUT_APP = 'ABOUT_APP', 'Sobre'
    CHANGE_PASSWORD = 'CHANGE_PASSWORD', 'Alterar senha'


UNITS = ['UPA Noroeste', 'Hospital Odilon Behrens']

ROLE_MENUS = {
    'coordenacao': [
        AppView.CLINICAL_DECISION,
        AppView.PATIENT_LIST,
        AppView.DASHBOARD,
        AppView.LEAN_MENU,
        AppView.NEW_PATIENT,
        AppView.PENDENCIES,
        AppView.INITIATE_TRANSFER,
        AppView.TRANSFERS,
        AppView.FINALIZED_PATIENTS,
        AppView.COLLABORATORS,
        AppView.UNIT_SELECTION,
        AppView.CLEAR_DATA,
        AppView.ABOUT_APP,
    ],
    'enfermeiro': [
        AppView.CLINICAL_DECISION,
        AppView.PATIENT_LIST,
        AppView.NEW_PATIENT,
        AppView.INITIATE_TRANSFER,
        AppView.TRANSFERS,
        AppView.LEAN_MENU,
        AppView.PENDENCIES,
        AppView.DASHBOARD,
        AppView.FINALIZED_PATIENTS,
        AppView.COLLABORATORS,
        AppView.UNIT_SELECTION,
        AppView.CLEAR_DATA,
        AppView.ABOUT_APP,
    ],
    'tecnico': [
        AppView.NEW_PATIENT,
        AppView.PATIENT_LIST,
        AppView.TRANSFERS,
        AppView.PENDENCIES,
        AppView.FINALIZED_PATIENTS,
        AppView.DASHBOARD,
        AppView.UNIT_SELECTION,
        AppView.ABOUT_APP,
    ],
}

# menu entries that carry a counter badge, keyed to the badge name
BADGED_VIEWS = {
    AppView.PATIENT_LIST: 'newPatients',
    AppView.PENDENCIES: 'pendencies',
    AppView.TRANSFERS: 'transferRequests',
}


def menu_for(role):
    return list(ROLE_MENUS.get(role, ROLE_MENUS['tecnico']))


def build_menu(role, badges: dict) -> list:
    items = []
    for view in menu_for(role):
        item = {'view': view.value, 'label': view.label}
        badge_key = BADGED_VIEWS.get(view)
        if badge_key and badges.get(badge_key):
            item['badge'] = badges[badge_key]
        items.append(item)
    return items
