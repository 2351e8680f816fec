from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ModerationLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action_type', models.CharField(choices=[('campsite_approve', 'Campsite approved'), ('campsite_reject', 'Campsite rejected'), ('owner_approve', 'Owner request approved'), ('owner_reject', 'Owner request rejected'), ('review_hide', 'Review hidden'), ('review_unhide', 'Review unhidden'), ('review_delete', 'Review deleted'), ('review_dismiss', 'Review reports dismissed')], max_length=30)),
                ('entity_type', models.CharField(choices=[('campsite', 'Campsite'), ('owner_request', 'Owner request'), ('review', 'Review')], max_length=30)),
                ('entity_id', models.CharField(max_length=64)),
                ('reason', models.TextField(blank=True, null=True)),
                ('metadata', models.JSONField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('admin', models.ForeignKey(help_text='The admin who performed the action.', on_delete=models.deletion.PROTECT, related_name='moderation_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'verbose_name': 'Moderation log entry',
                'verbose_name_plural': 'Moderation log',
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('action_type', ''), _negated=True), name='moderation_log_action_type_required'),
                    models.CheckConstraint(condition=models.Q(('entity_type', ''), _negated=True), name='moderation_log_entity_type_required'),
                    models.CheckConstraint(condition=models.Q(('entity_id', ''), _negated=True), name='moderation_log_entity_id_required'),
                ],
                'indexes': [
                    models.Index(fields=['entity_type', 'entity_id'], name='modlog_entity_idx'),
                    models.Index(fields=['action_type', '-created_at'], name='modlog_action_idx'),
                    models.Index(fields=['admin', '-created_at'], name='modlog_admin_idx'),
                ],
            },
        ),
    ]
