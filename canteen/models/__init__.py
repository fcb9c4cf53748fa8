from canteen.models.hr.employee import Employee
from canteen.models.feeding.feeding_event import FeedingEvent
