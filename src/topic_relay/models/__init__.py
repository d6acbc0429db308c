from .models import Topic, TopicRegistry, ConnectionRegistry
