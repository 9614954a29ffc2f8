"""
Page components for the finance client.

Each page receives its collaborators explicitly and follows the same
lifecycle: construct, ``bind()`` to register its event handlers, ``render()``
to (re)load data into view state, ``dispose()`` to drop handlers and owned
resources. The presentation layer reads the view state attributes and
forwards user events through ``dispatch()``.
"""

from contextlib import contextmanager

import structlog

from aggregation import balance_summary, category_series, goal_cards, monthly_series
from client.ui import Chart, RequestSequencer
from errors import FinanceError, Unauthorized, ValidationError
from export import write_csv
from validators import CATEGORIES

logger = structlog.get_logger(__name__)

LOGIN = 'login'
DASHBOARD = 'dashboard'
SESSION_EXPIRED_DELAY = 2.0
AFTER_AUTH_DELAY = 1.0


def _blank(*values):
    return any(value is None or not str(value).strip() for value in values)


class Page:
    redirects_on_unauthorized = True

    def __init__(self, api, session, notifier, navigator, confirm=None):
        self.api = api
        self.session = session
        self.notifier = notifier
        self.navigator = navigator
        self.confirm = confirm or (lambda message: False)
        self.handlers = {}

    def events(self):
        return {}

    def bind(self):
        self.handlers = self.events()
        return self

    def dispatch(self, event, *args, **kwargs):
        try:
            handler = self.handlers[event]
        except KeyError:
            raise LookupError(f"{type(self).__name__} has no handler bound for {event!r}")
        return handler(*args, **kwargs)

    def render(self):
        return True

    def dispose(self):
        self.handlers = {}

    def require_session(self):
        if self.session.is_authenticated:
            return True
        self.navigator.redirect(LOGIN)
        return False

    @contextmanager
    def reporting(self):
        """Turn API failures into error notifications."""
        try:
            yield
        except Unauthorized as error:
            self.notifier.error(error.message)
            if self.redirects_on_unauthorized:
                self.navigator.redirect(LOGIN, delay=SESSION_EXPIRED_DELAY)
        except FinanceError as error:
            self.notifier.error(error.message)


class AuthPage(Page):
    redirects_on_unauthorized = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.login_mode = True

    def events(self):
        return {'toggle': self.toggle_mode, 'submit': self.submit}

    @property
    def title(self):
        return 'Bem-vindo(a)' if self.login_mode else 'Crie sua Conta'

    @property
    def submit_label(self):
        return 'Entrar' if self.login_mode else 'Cadastrar'

    def toggle_mode(self):
        self.login_mode = not self.login_mode

    def submit(self, email, password, name=None):
        if _blank(email, password) or (not self.login_mode and _blank(name)):
            self.notifier.error(ValidationError.default_message)
            return False

        with self.reporting():
            if self.login_mode:
                data = self.api.login(email, password)
            else:
                data = self.api.register(name, email, password)
            self.session.save(data)
            self.notifier.notify(data.get('message') or 'Bem-vindo(a)!')
            self.navigator.redirect(DASHBOARD, delay=AFTER_AUTH_DELAY)
            return True
        return False


class DashboardPage(Page):
    """Balance summary, monthly bar chart and expense-by-category chart."""

    def __init__(self, *args, chart_factory=Chart, **kwargs):
        super().__init__(*args, **kwargs)
        self.chart_factory = chart_factory
        self.charts = {}
        self.title = ''
        self.summary = None
        self.monthly = None
        self.categories = None

    def events(self):
        return {'logout': self.logout, 'export': self.export_csv}

    def render(self):
        if not self.require_session():
            return False
        with self.reporting():
            transactions = self.api.list_transactions()
            self.summary = balance_summary(transactions)
            self.monthly = monthly_series(transactions)
            self.categories = category_series(transactions)
            self.title = f"Painel de {(self.session.user or {}).get('name', '')}"
            self._replace_chart('monthly', self.chart_factory('bar', self.monthly['labels'], {
                'Receitas': self.monthly['income'],
                'Gastos': self.monthly['expenses'],
            }))
            self._replace_chart('categories', self.chart_factory('doughnut', self.categories['labels'], {
                'Gastos': self.categories['values'],
            }))
            return True
        return False

    def _replace_chart(self, name, chart):
        previous = self.charts.get(name)
        if previous is not None:
            previous.destroy()
        self.charts[name] = chart

    def export_csv(self, path):
        with self.reporting():
            transactions = self.api.list_transactions()
            if not transactions:
                self.notifier.error('Nenhuma transação para exportar.')
                return None
            write_csv(path, transactions)
            self.notifier.notify('Dados exportados com sucesso!')
            return path
        return None

    def logout(self):
        self.notifier.notify('Até logo!')
        self.session.clear()
        self.navigator.redirect(LOGIN, delay=AFTER_AUTH_DELAY)

    def dispose(self):
        for chart in self.charts.values():
            chart.destroy()
        self.charts = {}
        super().dispose()


class GoalsPage(Page):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.cards = []

    def events(self):
        return {'add': self.add_goal, 'delete': self.delete_goal}

    @property
    def empty(self):
        return not self.cards

    def render(self):
        if not self.require_session():
            return False
        with self.reporting():
            transactions = self.api.list_transactions()
            goals = self.api.list_goals()
            self.cards = goal_cards(goals, transactions)
            return True
        return False

    def add_goal(self, description, amount):
        if _blank(description, amount):
            self.notifier.error(ValidationError.default_message)
            return False
        with self.reporting():
            self.api.create_goal(description, amount)
            self.render()
            self.notifier.notify('Meta adicionada com sucesso!')
            return True
        return False

    def delete_goal(self, id):
        if not self.confirm('Tem certeza que deseja excluir esta meta?'):
            return False
        with self.reporting():
            self.api.delete_goal(id)
            self.render()
            self.notifier.notify('Meta excluída.', 'error')
            return True
        return False


class TransactionsPage(Page):
    """
    Income or expense list with category/month filters and an edit modal.

    ``entering_id`` marks the row just added and ``exiting_ids`` the rows
    whose deletion is in flight, for row enter/exit animations.
    """

    ALL = 'all'

    def __init__(self, tx_type, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.type = tx_type
        self.categories = CATEGORIES[tx_type]
        self.filter_category = self.ALL
        self.filter_month = ''
        self.rows = []
        self.editing = None
        self.entering_id = None
        self.exiting_ids = set()
        self.sequencer = RequestSequencer()

    def events(self):
        return {
            'submit': self.add_transaction,
            'filter_category': self.set_category_filter,
            'filter_month': self.set_month_filter,
            'clear_filters': self.clear_filters,
            'edit': self.open_edit,
            'save_edit': self.save_edit,
            'cancel_edit': self.close_edit,
            'delete': self.delete_transaction,
        }

    def render(self, new_id=None):
        if not self.require_session():
            return False
        ticket = self.sequencer.next()
        with self.reporting():
            transactions = self.api.list_transactions()
            if not self.sequencer.is_current(ticket):
                logger.debug("stale_response_discarded", ticket=ticket)
                return False
            self.rows = self.visible(transactions)
            self.entering_id = new_id
            return True
        return False

    def visible(self, transactions):
        rows = [
            t for t in transactions
            if t['type'] == self.type
            and (not self.filter_month or str(t['date']).startswith(self.filter_month))
            and (self.filter_category == self.ALL or t['category'] == self.filter_category)
        ]
        return sorted(rows, key=lambda t: str(t['date'])[:10], reverse=True)

    def set_category_filter(self, category):
        self.filter_category = category or self.ALL
        return self.render()

    def set_month_filter(self, month):
        self.filter_month = month or ''
        return self.render()

    def clear_filters(self):
        self.filter_category = self.ALL
        self.filter_month = ''
        return self.render()

    def add_transaction(self, description, amount, date, category):
        if _blank(description, amount, date, category):
            self.notifier.error(ValidationError.default_message)
            return None
        with self.reporting():
            created = self.api.create_transaction({
                'description': description,
                'amount': amount,
                'date': date,
                'category': category,
                'type': self.type,
            })
            self.render(new_id=created['id'])
            self.notifier.notify('Transação adicionada com sucesso!')
            return created
        return None

    def open_edit(self, id):
        with self.reporting():
            transaction = next((t for t in self.api.list_transactions() if t['id'] == id), None)
            if transaction is None:
                self.notifier.error('Transação não encontrada.')
                return None
            self.editing = dict(transaction, date=str(transaction['date']).split('T')[0])
            return self.editing
        return None

    def close_edit(self):
        self.editing = None

    def save_edit(self, description, amount, date, category):
        if self.editing is None:
            return False
        if _blank(description, amount, date, category):
            self.notifier.error(ValidationError.default_message)
            return False
        with self.reporting():
            self.api.update_transaction(self.editing['id'], {
                'description': description,
                'amount': amount,
                'date': date,
                'category': category,
            })
            self.close_edit()
            self.render()
            self.notifier.notify('Transação salva com sucesso!')
            return True
        return False

    def delete_transaction(self, id):
        if not self.confirm('Tem certeza que deseja excluir esta transação?'):
            return False
        self.exiting_ids.add(id)
        deleted = False
        with self.reporting():
            self.api.delete_transaction(id)
            deleted = True
        self.exiting_ids.discard(id)
        if deleted:
            self.render()
            self.notifier.notify('Transação excluída.', 'error')
        return deleted
